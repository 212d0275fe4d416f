"""Structural tokenizer for fenced regions in generated Markdown."""

from __future__ import annotations

from dataclasses import dataclass
import re

_OPEN_FENCE_RE = re.compile(r"^ {0,3}(?P<fence>`{3,}|~{3,})[ \t]*(?P<info>[^`]*?)[ \t]*$")


@dataclass(frozen=True, slots=True)
class FenceLocation:
    """Zero-based line numbers of the opening and closing fence lines.

    ``end_line`` is ``None`` when the fence is never closed.
    """

    start_line: int
    end_line: int | None


@dataclass(frozen=True, slots=True)
class FencedRegion:
    tag: str
    payload: str
    location: FenceLocation

    @property
    def terminated(self) -> bool:
        return self.location.end_line is not None


def _info_tag(info: str) -> str:
    parts = info.split()
    return parts[0].lower() if parts else ""


def _is_closing_fence(line: str, fence: str) -> bool:
    body = line.rstrip()
    stripped = body.lstrip(" ")
    if len(body) - len(stripped) > 3:
        return False
    if len(stripped) < len(fence):
        return False
    return set(stripped) == {fence[0]}


def tokenize_fences(text: str) -> list[FencedRegion]:
    """Return every fenced region with its declared tag, in document order.

    Content inside a fence is never scanned for further fences. A fence that is
    never closed runs to the end of the text.
    """

    lines = text.split("\n")
    regions: list[FencedRegion] = []
    index = 0

    while index < len(lines):
        match = _OPEN_FENCE_RE.match(lines[index].rstrip("\r"))
        if match is None:
            index += 1
            continue

        fence = match.group("fence")
        start = index
        end: int | None = None
        cursor = start + 1
        while cursor < len(lines):
            if _is_closing_fence(lines[cursor], fence):
                end = cursor
                break
            cursor += 1

        body_end = end if end is not None else len(lines)
        regions.append(
            FencedRegion(
                tag=_info_tag(match.group("info")),
                payload="\n".join(lines[start + 1 : body_end]),
                location=FenceLocation(start_line=start, end_line=end),
            )
        )
        index = body_end + 1

    return regions
