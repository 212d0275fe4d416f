from __future__ import annotations

from manualgen.segmentation.models import SourceDocument
from manualgen.segmentation.ordering import natural_sort_key, sort_naturally, units_from_documents


def test_natural_sort_compares_embedded_numbers() -> None:
    assert sort_naturally(["part10.pdf", "part2.pdf", "part1.pdf"]) == ["part1.pdf", "part2.pdf", "part10.pdf"]


def test_natural_sort_is_case_insensitive() -> None:
    assert sort_naturally(["B2.pdf", "a10.pdf", "A9.pdf", "b1.pdf"]) == ["A9.pdf", "a10.pdf", "b1.pdf", "B2.pdf"]


def test_natural_sort_key_mixes_text_and_numbers() -> None:
    assert natural_sort_key("Manual_Part_2_Pages_11-20.pdf") < natural_sort_key("Manual_Part_10_Pages_91-100.pdf")
    assert natural_sort_key("1.pdf") < natural_sort_key("a.pdf")


def test_units_from_documents_orders_and_indexes_by_name() -> None:
    documents = [
        SourceDocument(name="part10.pdf", payload=b"ten", page_count=3),
        SourceDocument(name="part2.pdf", payload=b"two", page_count=1),
        SourceDocument(name="part1.pdf", payload=b"one", page_count=2),
    ]

    units = units_from_documents(documents)

    assert [(unit.index, unit.name) for unit in units] == [(0, "part1.pdf"), (1, "part2.pdf"), (2, "part10.pdf")]
    assert [(unit.page_start, unit.page_end) for unit in units] == [(0, 2), (0, 1), (0, 3)]
    assert [unit.payload for unit in units] == [b"one", b"two", b"ten"]


def test_natural_sort_handles_non_decimal_digit_characters() -> None:
    assert sort_naturally(["a.pdf", "1²2.pdf", "part١٠.pdf", "part2.pdf"]) == [
        "1²2.pdf",
        "a.pdf",
        "part2.pdf",
        "part١٠.pdf",
    ]
