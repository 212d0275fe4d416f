"""Explicit payload schemas for the fenced JSON block kinds.

Field names follow the camelCase keys the generator is instructed to emit.
Validation is strict: a number where a string is expected is a schema error,
not something to coerce. Unknown keys are ignored; the raw payload stays on
every parsed block.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, TypeAdapter
from pydantic.alias_generators import to_camel


class _PayloadSchema(BaseModel):
    model_config = ConfigDict(
        strict=True,
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
    )


class TocEntry(_PayloadSchema):
    chapter_label: str
    page_ref: str | int


class MenuEntry(_PayloadSchema):
    path_segments: list[str]
    description: str | None = None


class KeypadEntry(_PayloadSchema):
    input_sequence: str
    function: str
    note: str | None = None


class DataTablePayload(_PayloadSchema):
    headers: list[str]
    rows: list[list[str]]


class ImagePayload(_PayloadSchema):
    kind: Literal["diagram", "photo", "icon"]
    caption: str | None = None
    description: str | None = None


TOC_ADAPTER = TypeAdapter(list[TocEntry])
MENU_ADAPTER = TypeAdapter(list[MenuEntry])
KEYPAD_ADAPTER = TypeAdapter(list[KeypadEntry])
