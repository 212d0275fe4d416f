"""Page-bounded PDF splitting on top of PyMuPDF."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path

import pymupdf

from manualgen.segmentation.models import SourceDocument, Unit

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGES_PER_UNIT = 10


@dataclass(slots=True)
class SegmentationError(Exception):
    """Source document could not be read, decoded or split."""

    source: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (source={self.source})"


def _open_pdf(name: str, data: bytes) -> pymupdf.Document:
    if not data:
        raise SegmentationError(name, "Source document is empty")
    try:
        return pymupdf.open(stream=data, filetype="pdf")
    except Exception as exc:
        raise SegmentationError(name, f"Failed to decode PDF: {exc}") from exc


def count_pages(name: str, data: bytes) -> int:
    """Return the page count of a PDF payload, rejecting empty documents."""

    with _open_pdf(name, data) as doc:
        page_count = doc.page_count

    if page_count < 1:
        raise SegmentationError(name, "Source document has no pages")
    return page_count


def load_source_document(path: str | Path) -> SourceDocument:
    """Read and decode a PDF from disk."""

    source = Path(path)
    try:
        data = source.read_bytes()
    except OSError as exc:
        raise SegmentationError(str(source), f"Failed to read source file: {exc}") from exc
    return SourceDocument.from_bytes(source.name, data)


def _unit_name(base_name: str, part: int, start: int, end: int) -> str:
    stem = base_name[:-4] if base_name.lower().endswith(".pdf") else base_name
    return f"{stem}_Part_{part}_Pages_{start + 1}-{end}.pdf"


def _page_ranges(page_count: int, max_pages_per_unit: int) -> list[tuple[int, int]]:
    return [
        (start, min(start + max_pages_per_unit, page_count))
        for start in range(0, page_count, max_pages_per_unit)
    ]


def segment(doc: SourceDocument, max_pages_per_unit: int = DEFAULT_MAX_PAGES_PER_UNIT) -> list[Unit]:
    """Split ``doc`` into consecutive units of at most ``max_pages_per_unit`` pages."""

    if max_pages_per_unit <= 0:
        raise ValueError("max_pages_per_unit must be positive")
    if doc.page_count < 1:
        raise SegmentationError(doc.name, "Source document has no pages")

    if doc.page_count <= max_pages_per_unit:
        return [Unit(index=0, name=doc.name, page_start=0, page_end=doc.page_count, payload=doc.payload)]

    units: list[Unit] = []
    with _open_pdf(doc.name, doc.payload) as source_pdf:
        if source_pdf.page_count != doc.page_count:
            raise SegmentationError(
                doc.name,
                f"Page count mismatch: expected {doc.page_count}, decoded {source_pdf.page_count}",
            )

        for index, (start, end) in enumerate(_page_ranges(doc.page_count, max_pages_per_unit)):
            try:
                with pymupdf.open() as sub_pdf:
                    sub_pdf.insert_pdf(source_pdf, from_page=start, to_page=end - 1)
                    payload = sub_pdf.tobytes()
            except Exception as exc:
                raise SegmentationError(doc.name, f"Failed to extract pages {start + 1}-{end}: {exc}") from exc

            units.append(
                Unit(
                    index=index,
                    name=_unit_name(doc.name, index + 1, start, end),
                    page_start=start,
                    page_end=end,
                    payload=payload,
                )
            )

    logger.info("Split %s (%d pages) into %d units", doc.name, doc.page_count, len(units))
    return units
