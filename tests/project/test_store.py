from __future__ import annotations

import json
from pathlib import Path

import pytest

from manualgen.assembly.assembler import SECTION_MARKER
from manualgen.generation.config import ManualConfig, ReplacementRule, Tone
from manualgen.project.store import (
    PROJECT_FORMAT_VERSION,
    ProjectFormatError,
    SavedProject,
    export_markdown,
    load_project,
    save_project,
)


def _config() -> ManualConfig:
    return ManualConfig(
        target_language="Slovak",
        tone=Tone.PROFESSIONAL,
        replacements=(
            ReplacementRule("intec", "elift"),
            ReplacementRule("Intec Corp", "Elift Solutions"),
        ),
    )


def test_project_round_trip_reproduces_content_and_config(tmp_path: Path) -> None:
    content = "# Návod\r\n\n| A | B |\n|---|---|\n| 1 | |" + SECTION_MARKER + "```json:toc\n[]\n```\n"
    project = SavedProject.create(_config(), content, clock=lambda: 1_700_000_000.5)

    path = save_project(tmp_path / "nested" / "project.json", project)
    loaded = load_project(path)

    assert loaded == project
    assert loaded.content == content
    assert loaded.timestamp == 1_700_000_000_500
    assert loaded.version == PROJECT_FORMAT_VERSION


def test_saved_file_uses_documented_keys(tmp_path: Path) -> None:
    path = save_project(tmp_path / "project.json", SavedProject.create(_config(), "body", clock=lambda: 1.0))

    data = json.loads(path.read_text(encoding="utf-8"))

    assert set(data) == {"version", "timestamp", "config", "content"}
    assert data["config"]["targetLanguage"] == "Slovak"
    assert data["config"]["replacements"][0] == {"original": "intec", "replacement": "elift"}


@pytest.mark.parametrize(
    ("payload", "expected"),
    [
        ("{not json", "not valid JSON"),
        ("[]", "not an object"),
        (json.dumps({"version": "9.9", "timestamp": 1, "config": {}, "content": ""}), "Unsupported project version"),
        (json.dumps({"version": "1.0", "timestamp": "now", "config": {}, "content": ""}), "timestamp"),
        (json.dumps({"version": "1.0", "timestamp": 1, "config": {}, "content": 5}), "content"),
        (json.dumps({"version": "1.0", "timestamp": 1, "config": {"tone": "loud"}, "content": ""}), "Invalid project config"),
    ],
)
def test_invalid_project_files_raise(tmp_path: Path, payload: str, expected: str) -> None:
    path = tmp_path / "project.json"
    path.write_text(payload, encoding="utf-8")

    with pytest.raises(ProjectFormatError, match=expected):
        load_project(path)


def test_missing_project_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ProjectFormatError, match="Failed to read"):
        load_project(tmp_path / "missing.json")


def test_export_markdown_writes_text_verbatim(tmp_path: Path) -> None:
    content = "# Title\r\n\nBody\n"

    path = export_markdown(tmp_path / "out" / "manual.md", content)

    assert path.read_bytes() == content.encode("utf-8")
