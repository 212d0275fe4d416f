"""Typed semantic blocks parsed from fenced JSON payloads."""

from __future__ import annotations

from dataclasses import dataclass, field
import hashlib
import json
import logging
from typing import Any, ClassVar, Union

from pydantic import BaseModel, ValidationError

from manualgen.markup.fences import FencedRegion, FenceLocation, tokenize_fences
from manualgen.markup.schemas import (
    KEYPAD_ADAPTER,
    MENU_ADAPTER,
    TOC_ADAPTER,
    DataTablePayload,
    ImagePayload,
    KeypadEntry,
    MenuEntry,
    TocEntry,
)

logger = logging.getLogger(__name__)

TAG_TOC = "json:toc"
TAG_MENU = "json:menu"
TAG_KEYPAD = "json:keypad"
TAG_TABLE = "json:table"
TAG_IMAGE = "json:image"

RECOGNIZED_TAGS = frozenset({TAG_TOC, TAG_MENU, TAG_KEYPAD, TAG_TABLE, TAG_IMAGE})

_JSON_TYPE_NAMES: dict[type, str] = {
    dict: "object",
    list: "array",
    str: "string",
    int: "number",
    float: "number",
    bool: "boolean",
    type(None): "null",
}


def _dump(models: BaseModel | list[BaseModel] | tuple[BaseModel, ...]) -> Any:
    if isinstance(models, BaseModel):
        return models.model_dump(by_alias=True, exclude_none=True)
    return [model.model_dump(by_alias=True, exclude_none=True) for model in models]


@dataclass(frozen=True, slots=True)
class TableOfContents:
    tag: ClassVar[str] = TAG_TOC

    entries: tuple[TocEntry, ...]
    raw_payload: str = field(repr=False)
    location: FenceLocation

    def payload(self) -> Any:
        return _dump(self.entries)


@dataclass(frozen=True, slots=True)
class MenuTree:
    tag: ClassVar[str] = TAG_MENU

    items: tuple[MenuEntry, ...]
    raw_payload: str = field(repr=False)
    location: FenceLocation

    def payload(self) -> Any:
        return _dump(self.items)


@dataclass(frozen=True, slots=True)
class KeypadTable:
    tag: ClassVar[str] = TAG_KEYPAD

    rows: tuple[KeypadEntry, ...]
    raw_payload: str = field(repr=False)
    location: FenceLocation

    def payload(self) -> Any:
        return _dump(self.rows)


@dataclass(frozen=True, slots=True)
class DataTable:
    tag: ClassVar[str] = TAG_TABLE

    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]
    raw_payload: str = field(repr=False)
    location: FenceLocation

    def payload(self) -> Any:
        return {"headers": list(self.headers), "rows": [list(row) for row in self.rows]}


@dataclass(frozen=True, slots=True)
class ImageBlock:
    tag: ClassVar[str] = TAG_IMAGE

    kind: str
    caption: str | None
    description: str | None
    raw_payload: str = field(repr=False)
    location: FenceLocation

    def payload(self) -> Any:
        data: dict[str, str] = {"kind": self.kind}
        if self.caption is not None:
            data["caption"] = self.caption
        if self.description is not None:
            data["description"] = self.description
        return data


@dataclass(frozen=True, slots=True)
class MalformedBlock:
    """A recognized block whose payload failed decoding or validation."""

    tag: str
    raw_payload: str
    error: str
    location: FenceLocation


SemanticBlock = Union[TableOfContents, MenuTree, KeypadTable, DataTable, ImageBlock]


def block_key(block: SemanticBlock) -> str:
    """Content-based identity of a parsed block, insensitive to payload formatting."""

    canonical = json.dumps(
        {"tag": block.tag, "payload": block.payload()},
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _json_type_name(value: object) -> str:
    return _JSON_TYPE_NAMES.get(type(value), type(value).__name__)


def _describe_validation_error(exc: ValidationError) -> str:
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "<root>"
        details.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "schema validation failed: " + "; ".join(details)


def _build_block(tag: str, data: Any, region: FencedRegion) -> SemanticBlock:
    raw = region.payload
    location = region.location

    if tag == TAG_TOC:
        return TableOfContents(entries=tuple(TOC_ADAPTER.validate_python(data)), raw_payload=raw, location=location)
    if tag == TAG_MENU:
        return MenuTree(items=tuple(MENU_ADAPTER.validate_python(data)), raw_payload=raw, location=location)
    if tag == TAG_KEYPAD:
        return KeypadTable(rows=tuple(KEYPAD_ADAPTER.validate_python(data)), raw_payload=raw, location=location)
    if tag == TAG_TABLE:
        table = DataTablePayload.model_validate(data)
        return DataTable(
            headers=tuple(table.headers),
            rows=tuple(tuple(row) for row in table.rows),
            raw_payload=raw,
            location=location,
        )
    if tag == TAG_IMAGE:
        image = ImagePayload.model_validate(data)
        return ImageBlock(
            kind=image.kind,
            caption=image.caption,
            description=image.description,
            raw_payload=raw,
            location=location,
        )
    raise ValueError(f"Unsupported block tag: {tag}")


def parse_region(region: FencedRegion) -> SemanticBlock | MalformedBlock:
    """Validate one recognized fenced region into a block or a malformed block."""

    tag = region.tag
    if tag not in RECOGNIZED_TAGS:
        raise ValueError(f"Unsupported block tag: {tag}")

    def malformed(message: str) -> MalformedBlock:
        logger.info("Malformed %s block at line %d: %s", tag, region.location.start_line + 1, message)
        return MalformedBlock(tag=tag, raw_payload=region.payload, error=message, location=region.location)

    if not region.terminated:
        return malformed("unterminated fenced block")

    try:
        data = json.loads(region.payload)
    except json.JSONDecodeError as exc:
        return malformed(f"invalid JSON: {exc.msg} at line {exc.lineno} column {exc.colno}")

    expected = list if tag in {TAG_TOC, TAG_MENU, TAG_KEYPAD} else dict
    if not isinstance(data, expected):
        return malformed(f"expected {_JSON_TYPE_NAMES[expected]}, got {_json_type_name(data)}")

    try:
        return _build_block(tag, data, region)
    except ValidationError as exc:
        return malformed(_describe_validation_error(exc))


def extract_blocks(text: str) -> list[SemanticBlock | MalformedBlock]:
    """Parse every recognized fenced block of ``text`` in document order.

    Fences with other tags are left alone. A broken block never affects its
    neighbours and is reported as ``MalformedBlock`` rather than dropped.
    """

    return [parse_region(region) for region in tokenize_fences(text) if region.tag in RECOGNIZED_TAGS]
