"""Literal replacement rules (rebranding of product and company names)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable

from manualgen.generation.config import ReplacementRule
from manualgen.markup.fences import tokenize_fences


def _substitute(text: str, rules: list[ReplacementRule]) -> str:
    for rule in rules:
        text = text.replace(rule.match, rule.replace)
    return text


def apply_replacements(text: str, rules: Iterable[ReplacementRule]) -> str:
    """Apply ``rules`` in order as plain substring substitutions.

    Fenced regions (fence lines included) are copied unchanged so that JSON
    keys, tags and payload structure survive rules that happen to match them.
    """

    active = [rule for rule in rules if rule.match]
    if not active:
        return text

    lines = text.split("\n")
    pieces: list[str] = []
    cursor = 0
    for region in tokenize_fences(text):
        start = region.location.start_line
        end = region.location.end_line if region.location.end_line is not None else len(lines) - 1
        if start > cursor:
            pieces.append(_substitute("\n".join(lines[cursor:start]), active))
        pieces.append("\n".join(lines[start : end + 1]))
        cursor = end + 1
    if cursor < len(lines):
        pieces.append(_substitute("\n".join(lines[cursor:]), active))
    return "\n".join(pieces)


def load_replacement_rules(path: str | Path) -> tuple[ReplacementRule, ...]:
    """Read rules from a JSON list of ``{"original", "replacement"}`` objects."""

    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError("Replacement file must contain a JSON list")
    rules: list[ReplacementRule] = []
    for item in data:
        if not isinstance(item, dict):
            raise ValueError("Replacement entries must be objects")
        rules.append(ReplacementRule.from_dict(item))
    return tuple(rules)
