"""Segmentation package interfaces."""

from .models import SourceDocument, Unit
from .ordering import natural_sort_key, sort_naturally, units_from_documents
from .segmenter import (
    DEFAULT_MAX_PAGES_PER_UNIT,
    SegmentationError,
    count_pages,
    load_source_document,
    segment,
)

__all__ = [
    "DEFAULT_MAX_PAGES_PER_UNIT",
    "SegmentationError",
    "SourceDocument",
    "Unit",
    "count_pages",
    "load_source_document",
    "natural_sort_key",
    "segment",
    "sort_naturally",
    "units_from_documents",
]
