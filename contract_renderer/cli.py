from __future__ import annotations

"""Command-line shell: load a JSON document, apply mention edits, render HTML.

The exit status is 1 when the document cannot be loaded or rendered.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from contract_renderer.core.importers import DocumentImportError, load_document
from contract_renderer.core.services import RenderService
from contract_renderer.logging_config import setup_logging


def _split_assignment(raw: str) -> Tuple[str, str]:
    mention_id, sep, value = raw.partition("=")
    if not sep or not mention_id:
        raise argparse.ArgumentTypeError(f"expected ID=VALUE, got {raw!r}")
    return mention_id, value


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="contract-renderer", description="Render a contract document to HTML.")
    ap.add_argument("input_json", help="Path to the document JSON (list of sections)")
    ap.add_argument("-o", "--out", help="Write HTML here instead of stdout")
    ap.add_argument("--set-value", action="append", default=[], type=_split_assignment, metavar="ID=VALUE",
                    help="Update a mention value before rendering (repeatable)")
    ap.add_argument("--set-color", action="append", default=[], type=_split_assignment, metavar="ID=COLOR",
                    help="Update a mention colour before rendering (repeatable)")
    ap.add_argument("--validate", action="store_true", help="Print validation results for every mention to stderr")
    ap.add_argument("--stats", action="store_true", help="Print mention statistics to stderr")
    ap.add_argument("--pretty", action="store_true", help="Pretty-print the HTML")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    """
    Configure logging, load the document, apply edits and render.
    """
    args = build_parser().parse_args(argv)
    setup_logging()

    try:
        document = load_document(args.input_json)
    except DocumentImportError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    service = RenderService()
    service.load(document)

    for mention_id, value in args.set_value:
        result = service.mentions.update_mention_value(mention_id, value)
        if not result.validation.is_valid:
            print(f"Warning: {mention_id}: {result.validation.error}", file=sys.stderr)
    for mention_id, color in args.set_color:
        service.mentions.update_mention_color(mention_id, color)

    result = service.render(pretty=args.pretty)
    if not result.success:
        print(f"Error: {result.message}", file=sys.stderr)
        return 1

    if args.out:
        Path(args.out).write_text(result.content or "", encoding="utf-8")
        print(f"Wrote {args.out}", file=sys.stderr)
    else:
        sys.stdout.write(result.content or "")
        sys.stdout.write("\n")

    if args.validate:
        report = {mid: res.to_dict() for mid, res in service.mentions.validate_all_mentions().items()}
        print(json.dumps(report, indent=2, ensure_ascii=False), file=sys.stderr)
    if args.stats:
        print(json.dumps(service.mentions.statistics().to_dict(), indent=2, ensure_ascii=False), file=sys.stderr)

    return 0


