from __future__ import annotations

from pathlib import Path

import pymupdf
import pytest

from manualgen.segmentation.models import SourceDocument
from manualgen.segmentation.segmenter import SegmentationError, load_source_document, segment


def _pdf_bytes(page_count: int) -> bytes:
    doc = pymupdf.open()
    for number in range(1, page_count + 1):
        page = doc.new_page()
        page.insert_text((72, 72), f"Page marker {number}")
    data = doc.tobytes()
    doc.close()
    return data


def _page_markers(payload: bytes) -> list[str]:
    with pymupdf.open(stream=payload, filetype="pdf") as doc:
        return [page.get_text("text").strip() for page in doc]


def test_small_document_yields_single_unit_with_original_bytes() -> None:
    data = _pdf_bytes(4)
    doc = SourceDocument.from_bytes("manual.pdf", data)

    units = segment(doc, 10)

    assert len(units) == 1
    assert units[0].index == 0
    assert units[0].name == "manual.pdf"
    assert (units[0].page_start, units[0].page_end) == (0, 4)
    assert units[0].payload == data


def test_document_equal_to_limit_is_not_split() -> None:
    doc = SourceDocument.from_bytes("manual.pdf", _pdf_bytes(5))

    units = segment(doc, 5)

    assert len(units) == 1
    assert units[0].page_count == 5


@pytest.mark.parametrize(("page_count", "limit"), [(23, 10), (20, 10), (7, 3), (2, 1)])
def test_units_partition_page_range_without_gaps(page_count: int, limit: int) -> None:
    doc = SourceDocument.from_bytes("manual.pdf", _pdf_bytes(page_count))

    units = segment(doc, limit)

    assert [unit.index for unit in units] == list(range(len(units)))
    covered: list[int] = []
    for unit in units:
        covered.extend(range(unit.page_start, unit.page_end))
    assert covered == list(range(page_count))
    assert all(unit.page_count == limit for unit in units[:-1])
    expected_last = page_count % limit or limit
    assert units[-1].page_count == expected_last


def test_split_units_contain_exactly_their_pages_in_order() -> None:
    doc = SourceDocument.from_bytes("Lift Manual.pdf", _pdf_bytes(7))

    units = segment(doc, 3)

    assert [unit.name for unit in units] == [
        "Lift Manual_Part_1_Pages_1-3.pdf",
        "Lift Manual_Part_2_Pages_4-6.pdf",
        "Lift Manual_Part_3_Pages_7-7.pdf",
    ]
    assert _page_markers(units[0].payload) == ["Page marker 1", "Page marker 2", "Page marker 3"]
    assert _page_markers(units[2].payload) == ["Page marker 7"]
    assert doc.page_count == 7


def test_segment_rejects_non_positive_limit() -> None:
    doc = SourceDocument.from_bytes("manual.pdf", _pdf_bytes(2))

    with pytest.raises(ValueError, match="max_pages_per_unit"):
        segment(doc, 0)


def test_corrupt_payload_raises_segmentation_error() -> None:
    with pytest.raises(SegmentationError, match="broken.pdf"):
        SourceDocument.from_bytes("broken.pdf", b"%PDF-1.7 this is not really a pdf")


def test_empty_payload_raises_segmentation_error() -> None:
    with pytest.raises(SegmentationError, match="empty"):
        SourceDocument.from_bytes("empty.pdf", b"")


def test_load_source_document_reads_page_count(tmp_path: Path) -> None:
    path = tmp_path / "manual.pdf"
    path.write_bytes(_pdf_bytes(3))

    doc = load_source_document(path)

    assert doc.name == "manual.pdf"
    assert doc.page_count == 3


def test_load_source_document_missing_file(tmp_path: Path) -> None:
    with pytest.raises(SegmentationError, match="Failed to read source file"):
        load_source_document(tmp_path / "missing.pdf")
