"""Project persistence interfaces."""

from .store import (
    PROJECT_FORMAT_VERSION,
    ProjectFormatError,
    SavedProject,
    export_markdown,
    load_project,
    save_project,
)

__all__ = [
    "PROJECT_FORMAT_VERSION",
    "ProjectFormatError",
    "SavedProject",
    "export_markdown",
    "load_project",
    "save_project",
]
