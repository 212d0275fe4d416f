"""Saved project records and Markdown export."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from pathlib import Path
import time
from typing import Any, Callable

from manualgen.generation.config import ManualConfig

logger = logging.getLogger(__name__)

PROJECT_FORMAT_VERSION = "1.0"


@dataclass(slots=True)
class ProjectFormatError(Exception):
    """Persisted project file is unreadable or not in the expected format."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message} (path={self.path})"


@dataclass(frozen=True, slots=True)
class SavedProject:
    version: str
    timestamp: int
    config: ManualConfig
    content: str

    @classmethod
    def create(
        cls,
        config: ManualConfig,
        content: str,
        *,
        clock: Callable[[], float] = time.time,
    ) -> "SavedProject":
        return cls(
            version=PROJECT_FORMAT_VERSION,
            timestamp=int(clock() * 1000),
            config=config,
            content=content,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "timestamp": self.timestamp,
            "config": self.config.to_dict(),
            "content": self.content,
        }


def save_project(path: str | Path, project: SavedProject) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(project.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
    logger.info("Saved project to %s", target)
    return target


def load_project(path: str | Path) -> SavedProject:
    source = Path(path)
    try:
        data = json.loads(source.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ProjectFormatError(source, f"Failed to read project file: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ProjectFormatError(source, f"Project file is not valid JSON: {exc.msg}") from exc

    if not isinstance(data, dict):
        raise ProjectFormatError(source, "Project payload is not an object")

    version = data.get("version")
    if version != PROJECT_FORMAT_VERSION:
        raise ProjectFormatError(source, f"Unsupported project version: {version!r}")

    timestamp = data.get("timestamp")
    if not isinstance(timestamp, int) or isinstance(timestamp, bool):
        raise ProjectFormatError(source, "Project timestamp must be an integer")

    content = data.get("content")
    if not isinstance(content, str):
        raise ProjectFormatError(source, "Project content must be a string")

    config_raw = data.get("config")
    if not isinstance(config_raw, dict):
        raise ProjectFormatError(source, "Project config must be an object")
    try:
        config = ManualConfig.from_dict(config_raw)
    except ValueError as exc:
        raise ProjectFormatError(source, f"Invalid project config: {exc}") from exc

    return SavedProject(version=version, timestamp=timestamp, config=config, content=content)


def export_markdown(path: str | Path, content: str) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(content, encoding="utf-8", newline="")
    return target
