"""Natural ordering for caller-supplied, already split documents."""

from __future__ import annotations

import re
from typing import Callable, Iterable, TypeVar

from manualgen.segmentation.models import SourceDocument, Unit

T = TypeVar("T")

_DIGITS_RE = re.compile(r"(\d+)")


def natural_sort_key(name: str) -> tuple[tuple[int, int | str], ...]:
    """Case-insensitive key comparing embedded integers numerically.

    ``part10`` sorts after ``part2``; text and number segments never compare
    against each other directly because every segment is tagged by kind.
    """

    parts: list[tuple[int, int | str]] = []
    for segment in _DIGITS_RE.split(name.casefold()):
        if not segment:
            continue
        if segment.isdecimal():
            parts.append((0, int(segment)))
        else:
            parts.append((1, segment))
    return tuple(parts)


def sort_naturally(items: Iterable[T], *, key: Callable[[T], str] = str) -> list[T]:
    return sorted(items, key=lambda item: (natural_sort_key(key(item)), key(item)))


def units_from_documents(documents: Iterable[SourceDocument]) -> list[Unit]:
    """Turn pre-split documents into units, ordered by natural name order."""

    ordered = sort_naturally(documents, key=lambda doc: doc.name)
    return [
        Unit(index=index, name=doc.name, page_start=0, page_end=doc.page_count, payload=doc.payload)
        for index, doc in enumerate(ordered)
    ]
