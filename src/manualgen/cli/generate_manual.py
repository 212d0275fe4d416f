"""CLI entrypoint for turning PDF manuals into normalized Markdown."""

from __future__ import annotations

import argparse
from collections import Counter
import json
import logging
from pathlib import Path

from dotenv import load_dotenv

from manualgen.assembly.assembler import AssemblyAborted, AssemblyState, UnitProcessingError, UnitProcessor
from manualgen.assembly.pipeline import ManualPipeline
from manualgen.generation.config import DEFAULT_TARGET_LANGUAGE, GenerationSettings, ManualConfig, Tone
from manualgen.generation.openrouter import OpenRouterUnitProcessor
from manualgen.generation.replacements import load_replacement_rules
from manualgen.markup.blocks import MalformedBlock
from manualgen.project.store import SavedProject, export_markdown, save_project
from manualgen.segmentation.segmenter import DEFAULT_MAX_PAGES_PER_UNIT, SegmentationError

load_dotenv()

LOGGER = logging.getLogger(__name__)


def _collect_inputs(targets: list[str]) -> list[Path]:
    paths: list[Path] = []
    for raw in targets:
        target = Path(raw)
        if target.is_dir():
            paths.extend(path for path in target.iterdir() if path.is_file() and path.suffix.lower() == ".pdf")
        else:
            paths.append(target)
    return paths


def _build_processor(settings: GenerationSettings, config: ManualConfig) -> UnitProcessor:
    return OpenRouterUnitProcessor(settings, config)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a normalized Markdown manual from PDF sources")
    parser.add_argument(
        "--path",
        action="append",
        required=True,
        help="Source PDF or directory of pre-split PDFs (repeatable)",
    )
    parser.add_argument(
        "--max-pages",
        type=int,
        default=DEFAULT_MAX_PAGES_PER_UNIT,
        help="Maximum pages per unit when splitting a single document",
    )
    parser.add_argument("--language", default=DEFAULT_TARGET_LANGUAGE, help="Target language")
    parser.add_argument("--tone", choices=[tone.value for tone in Tone], default=Tone.PROFESSIONAL.value)
    parser.add_argument("--replacements", help="JSON file with replacement rules")
    parser.add_argument("--output", help="Write the normalized Markdown here")
    parser.add_argument("--project", help="Write a saved project record here")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )
    args = _parse_args(argv)

    if args.max_pages < 1:
        LOGGER.error("--max-pages must be >= 1")
        return 2

    try:
        settings = GenerationSettings.from_env()
        rules = load_replacement_rules(args.replacements) if args.replacements else ()
        config = ManualConfig(target_language=args.language, tone=Tone(args.tone), replacements=rules)
    except (OSError, ValueError) as exc:
        LOGGER.error("Configuration error: %s", exc)
        return 2

    pipeline = ManualPipeline(_build_processor(settings, config), max_pages_per_unit=args.max_pages)

    last_state: AssemblyState | None = None

    def _on_progress(state: AssemblyState) -> None:
        nonlocal last_state
        last_state = state
        LOGGER.info(
            "Progress: %d/%d units (%d%%)",
            state.current_unit_index,
            state.total_units,
            state.percent_complete,
        )

    try:
        result = pipeline.run_paths(_collect_inputs(args.path), on_progress=_on_progress)
    except (SegmentationError, UnitProcessingError, AssemblyAborted, ValueError) as exc:
        payload: dict[str, object] = {
            "error": str(exc),
            "stage": "segmentation" if isinstance(exc, SegmentationError) else "assembly",
            "progress": last_state.to_dict() if last_state is not None else None,
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 1

    outputs: dict[str, str] = {}
    if args.output:
        outputs["markdown"] = str(export_markdown(args.output, result.text))
    if args.project:
        outputs["project"] = str(save_project(args.project, SavedProject.create(config, result.text)))

    block_counts = Counter(block.tag for block in result.blocks if not isinstance(block, MalformedBlock))
    summary = {
        "units": [
            {"index": unit.index, "name": unit.name, "pages": unit.page_label} for unit in result.units
        ],
        "characters": len(result.text),
        "blocks": dict(sorted(block_counts.items())),
        "malformed_blocks": [
            {"tag": block.tag, "line": block.location.start_line + 1, "error": block.error}
            for block in result.malformed_blocks
        ],
        "outputs": outputs,
    }
    print(json.dumps(summary, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
