"""Assembly package interfaces."""

from .assembler import (
    SECTION_MARKER,
    AssemblyAborted,
    AssemblyState,
    UnitProcessingError,
    assemble,
    split_sections,
)
from .pipeline import ManualPipeline, PipelineResult, postprocess, resolve_units

__all__ = [
    "SECTION_MARKER",
    "AssemblyAborted",
    "AssemblyState",
    "ManualPipeline",
    "PipelineResult",
    "UnitProcessingError",
    "assemble",
    "postprocess",
    "resolve_units",
    "split_sections",
]
