"""Ragged Markdown table repair.

Generated Markdown regularly drops trailing empty cells, which makes renderers
discard or misalign the row. Rows are padded with empty cells until they carry
as many pipes as the header separator above them. Cell contents are never
inspected and rows that already have enough pipes, or more, are left alone.
"""

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

_SEPARATOR_RE = re.compile(r"^\s*\|?\s*:?-+:?\s*(?:\|\s*:?-+:?\s*)*\|?\s*$")


def is_header_separator(line: str) -> bool:
    return _SEPARATOR_RE.match(line) is not None


def _split_line_ending(line: str) -> tuple[str, str]:
    body = line.rstrip("\r")
    return body, line[len(body) :]


def pad_row(row: str, expected_pipes: int) -> str:
    """Append empty cells until ``row`` holds ``expected_pipes`` pipes."""

    missing = expected_pipes - row.count("|")
    if missing <= 0:
        return row
    return row + " |" * missing


def normalize_tables(text: str) -> str:
    """Pad short table rows to the column count declared by their separator line."""

    output: list[str] = []
    in_table = False
    expected_pipes = 0

    # Split on "\n" only so that padding never introduces a new line boundary.
    for line_no, line in enumerate(text.split("\n")):
        body, ending = _split_line_ending(line)

        if is_header_separator(body):
            in_table = True
            expected_pipes = body.count("|")
            output.append(line)
            continue

        if in_table and body.lstrip().startswith("|"):
            pipes = body.count("|")
            if pipes < expected_pipes:
                output.append(pad_row(body, expected_pipes) + ending)
                continue
            if pipes > expected_pipes:
                logger.debug(
                    "Line %d has %d pipes, header declares %d; left untouched",
                    line_no + 1,
                    pipes,
                    expected_pipes,
                )
            output.append(line)
            continue

        in_table = False
        output.append(line)

    return "\n".join(output)
