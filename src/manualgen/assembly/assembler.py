"""Sequential, order-preserving assembly of per-unit generation results."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import threading
from typing import Callable, Sequence

from manualgen.segmentation.models import Unit

logger = logging.getLogger(__name__)

SECTION_MARKER = "\n\n<!-- section-break -->\n\n"


@dataclass(frozen=True, slots=True)
class AssemblyState:
    """Progress snapshot handed to progress callbacks."""

    total_units: int
    current_unit_index: int
    percent_complete: int

    def to_dict(self) -> dict[str, int]:
        return {
            "total_units": self.total_units,
            "current_unit_index": self.current_unit_index,
            "percent_complete": self.percent_complete,
        }


@dataclass(slots=True)
class UnitProcessingError(Exception):
    """The unit processor failed; the whole assembly run is abandoned."""

    unit_index: int
    unit_name: str
    state: AssemblyState
    message: str

    def __str__(self) -> str:
        return (
            f"{self.message} (unit={self.unit_name}, index={self.unit_index}, "
            f"completed={self.state.current_unit_index}/{self.state.total_units})"
        )


@dataclass(slots=True)
class AssemblyAborted(Exception):
    """Caller requested an abort between two units."""

    state: AssemblyState

    def __str__(self) -> str:
        return f"Assembly aborted after {self.state.current_unit_index}/{self.state.total_units} units"


UnitProcessor = Callable[[Unit], str]
ProgressCallback = Callable[[AssemblyState], None]


def _snapshot(total: int, completed: int) -> AssemblyState:
    return AssemblyState(
        total_units=total,
        current_unit_index=completed,
        percent_complete=(completed * 100) // total,
    )


def assemble(
    units: Sequence[Unit],
    process: UnitProcessor,
    on_progress: ProgressCallback | None = None,
    *,
    section_marker: str = SECTION_MARKER,
    abort_event: threading.Event | None = None,
) -> str:
    """Run ``process`` over ``units`` one at a time and join the results in order.

    Fails fast: the first processor error is raised as ``UnitProcessingError``
    and nothing produced so far is returned.
    """

    if not units:
        raise ValueError("units cannot be empty")

    ordered = sorted(units, key=lambda unit: unit.index)
    total = len(ordered)
    state = _snapshot(total, 0)
    if on_progress is not None:
        on_progress(state)

    fragments: list[str] = []
    for unit in ordered:
        if abort_event is not None and abort_event.is_set():
            logger.warning("Assembly aborted before unit %s", unit.name)
            raise AssemblyAborted(state)

        logger.info("Processing unit %d/%d: %s (pages %s)", unit.index + 1, total, unit.name, unit.page_label)
        try:
            result = process(unit)
        except Exception as exc:
            raise UnitProcessingError(
                unit_index=unit.index,
                unit_name=unit.name,
                state=state,
                message=f"Unit processing failed: {exc}",
            ) from exc

        if not isinstance(result, str) or not result:
            raise UnitProcessingError(
                unit_index=unit.index,
                unit_name=unit.name,
                state=state,
                message="Unit processor returned empty output",
            )

        fragments.append(result)
        state = _snapshot(total, len(fragments))
        if on_progress is not None:
            on_progress(state)

    return section_marker.join(fragments)


def split_sections(text: str, marker: str = SECTION_MARKER) -> list[str]:
    """Split assembled text back into its per-unit sections."""

    if not marker:
        raise ValueError("marker cannot be empty")
    return text.split(marker)
