"""End-to-end manual pipeline: segment, assemble, repair tables, parse blocks."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
import threading
from typing import Sequence

from manualgen.assembly.assembler import SECTION_MARKER, ProgressCallback, UnitProcessor, assemble
from manualgen.markup.blocks import MalformedBlock, SemanticBlock, extract_blocks
from manualgen.markup.tables import normalize_tables
from manualgen.segmentation.models import SourceDocument, Unit
from manualgen.segmentation.ordering import units_from_documents
from manualgen.segmentation.segmenter import DEFAULT_MAX_PAGES_PER_UNIT, load_source_document, segment

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PipelineResult:
    """Normalized text plus the parsed block stream for the renderer."""

    text: str
    blocks: list[SemanticBlock | MalformedBlock]
    units: list[Unit]

    @property
    def malformed_blocks(self) -> list[MalformedBlock]:
        return [block for block in self.blocks if isinstance(block, MalformedBlock)]


def resolve_units(
    documents: Sequence[SourceDocument],
    *,
    max_pages_per_unit: int = DEFAULT_MAX_PAGES_PER_UNIT,
) -> list[Unit]:
    """Segment a single document, or order several pre-split ones by name."""

    if not documents:
        raise ValueError("documents cannot be empty")
    if len(documents) == 1:
        return segment(documents[0], max_pages_per_unit)

    logger.info("Using %d caller-supplied documents as units", len(documents))
    return units_from_documents(documents)


def postprocess(text: str) -> tuple[str, list[SemanticBlock | MalformedBlock]]:
    normalized = normalize_tables(text)
    return normalized, extract_blocks(normalized)


class ManualPipeline:
    """Drive documents through the unit processor and clean up the result."""

    def __init__(
        self,
        process: UnitProcessor,
        *,
        max_pages_per_unit: int = DEFAULT_MAX_PAGES_PER_UNIT,
        section_marker: str = SECTION_MARKER,
    ) -> None:
        if max_pages_per_unit <= 0:
            raise ValueError("max_pages_per_unit must be positive")

        self._process = process
        self._max_pages_per_unit = max_pages_per_unit
        self._section_marker = section_marker

    def run(
        self,
        documents: Sequence[SourceDocument],
        *,
        on_progress: ProgressCallback | None = None,
        abort_event: threading.Event | None = None,
    ) -> PipelineResult:
        units = resolve_units(documents, max_pages_per_unit=self._max_pages_per_unit)
        assembled = assemble(
            units,
            self._process,
            on_progress,
            section_marker=self._section_marker,
            abort_event=abort_event,
        )
        text, blocks = postprocess(assembled)

        malformed = sum(1 for block in blocks if isinstance(block, MalformedBlock))
        logger.info("Assembled %d units, %d blocks (%d malformed)", len(units), len(blocks), malformed)
        return PipelineResult(text=text, blocks=blocks, units=units)

    def run_paths(
        self,
        paths: Sequence[str | Path],
        *,
        on_progress: ProgressCallback | None = None,
        abort_event: threading.Event | None = None,
    ) -> PipelineResult:
        documents = [load_source_document(path) for path in paths]
        return self.run(documents, on_progress=on_progress, abort_event=abort_event)
