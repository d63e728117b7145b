"""Extract the header fields and item table from a shipping-guide PDF.

  1. load_page_tokens   – rebuild positioned text runs from page.chars
  2. extract_fields     – label-anchored and pattern searches for each header field
  3. reconstruct_items  – column-aware walk of the rows under CANTIDAD/DESCRIPCIÓN
  4. normalize_record   – upper-case, trim and pad quantities
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from guide_layout import DEFAULT_MAX_DISTANCE
from guide_models import GuideParseError
from guide_pipeline import parse_guide_pdf, print_report


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract the fields and items of a shipping guide PDF.",
    )
    parser.add_argument("pdf", help="Path to the PDF file")
    parser.add_argument(
        "-p", "--page",
        type=int, default=1, metavar="N",
        help="Page to read, 1-based (default: 1)",
    )
    parser.add_argument(
        "--max-distance",
        type=float, default=DEFAULT_MAX_DISTANCE, metavar="PT",
        help=f"How far right of a label to look for its value (default: {DEFAULT_MAX_DISTANCE})",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the record as JSON instead of a report",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log extraction decisions",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    path = Path(args.pdf)
    if not path.exists():
        print(f"Error: file not found: {path}", file=sys.stderr)
        return 1

    try:
        record = parse_guide_pdf(path, page_number=args.page, max_distance=args.max_distance)
    except GuideParseError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(record.to_dict(), ensure_ascii=False, indent=2))
    else:
        print_report(record, source=path.name)
    return 0


if __name__ == "__main__":
    sys.exit(main())
