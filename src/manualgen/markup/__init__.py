"""Structural repair and block parsing for generated Markdown."""

from .blocks import (
    RECOGNIZED_TAGS,
    DataTable,
    ImageBlock,
    KeypadTable,
    MalformedBlock,
    MenuTree,
    SemanticBlock,
    TableOfContents,
    block_key,
    extract_blocks,
    parse_region,
)
from .fences import FencedRegion, FenceLocation, tokenize_fences
from .tables import is_header_separator, normalize_tables, pad_row

__all__ = [
    "RECOGNIZED_TAGS",
    "DataTable",
    "FenceLocation",
    "FencedRegion",
    "ImageBlock",
    "KeypadTable",
    "MalformedBlock",
    "MenuTree",
    "SemanticBlock",
    "TableOfContents",
    "block_key",
    "extract_blocks",
    "is_header_separator",
    "normalize_tables",
    "pad_row",
    "parse_region",
    "tokenize_fences",
]
