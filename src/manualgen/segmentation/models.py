"""Canonical data structures shared by segmentation and assembly."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class SourceDocument:
    """A decoded source PDF with its page count."""

    name: str
    payload: bytes = field(repr=False)
    page_count: int

    @classmethod
    def from_bytes(cls, name: str, data: bytes) -> "SourceDocument":
        from manualgen.segmentation.segmenter import count_pages

        return cls(name=name, payload=data, page_count=count_pages(name, data))


@dataclass(frozen=True, slots=True)
class Unit:
    """A bounded sub-document covering pages ``[page_start, page_end)``."""

    index: int
    name: str
    page_start: int
    page_end: int
    payload: bytes = field(repr=False)

    @property
    def page_count(self) -> int:
        return self.page_end - self.page_start

    @property
    def page_label(self) -> str:
        """Human-readable 1-based inclusive page range."""

        return f"{self.page_start + 1}-{self.page_end}"
