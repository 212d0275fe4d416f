"""CLI command for repairing tables and validating blocks in a Markdown file."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from manualgen.assembly.pipeline import postprocess
from manualgen.markup.blocks import MalformedBlock, block_key


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Normalize Markdown tables and report fenced JSON blocks")
    parser.add_argument("--path", required=True, help="Markdown file to check")
    parser.add_argument("--output", help="Write the normalized Markdown here")
    args = parser.parse_args(argv)

    source = Path(args.path)
    try:
        original = source.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(json.dumps({"path": str(source), "error": f"Failed to read Markdown file: {exc}"}, indent=2))
        return 2
    normalized, blocks = postprocess(original)

    if args.output:
        Path(args.output).write_text(normalized, encoding="utf-8", newline="")

    report: list[dict[str, object]] = []
    for block in blocks:
        entry: dict[str, object] = {"tag": block.tag, "line": block.location.start_line + 1}
        if isinstance(block, MalformedBlock):
            entry["error"] = block.error
        else:
            entry["key"] = block_key(block)
        report.append(entry)

    malformed = sum(1 for block in blocks if isinstance(block, MalformedBlock))
    payload = {
        "path": str(source),
        "tables_repaired": normalized != original,
        "blocks": report,
        "malformed": malformed,
    }
    print(json.dumps(payload, ensure_ascii=True, indent=2))
    return 0 if malformed == 0 else 1


if __name__ == "__main__":
    raise SystemExit(main())
