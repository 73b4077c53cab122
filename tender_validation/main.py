"""
main.py — Command-line entry point.

Handy for checking a folder of bid documents against a tender's list
before uploading, and for reproducing a user's "why was my bid rejected"
ticket locally:

    python -m tender_validation.main bid/*.pdf \\
        --require "PAN Card" --require "GST Certificate" --require "EMD"

Prints the same JSON the API returns. Exit status: 0 valid, 2 invalid,
1 bad input.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from tender_validation.config import config
from tender_validation.extraction import build_uploads
from tender_validation.matcher import get_matcher

logger = logging.getLogger("tender_validation")


def _read_files(paths: List[str]) -> List[Tuple[str, bytes]]:
    files: List[Tuple[str, bytes]] = []
    for raw in paths:
        path = Path(raw)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        files.append((path.name, path.read_bytes()))
    return files


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="tender_validation",
        description="Check bid documents against a tender's required document list",
    )
    parser.add_argument("files", nargs="*", help="Uploaded documents (PDF)")
    parser.add_argument(
        "--require", "-r", action="append", default=[], metavar="LABEL",
        help="Required document label (repeatable)",
    )
    parser.add_argument(
        "--names-only", action="store_true",
        help="Match on file names only; skip text extraction",
    )
    parser.add_argument("--output", "-o", default=None, help="JSON output path (default: stdout)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")

    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        files = _read_files(args.files)
    except FileNotFoundError as exc:
        logger.error("%s", exc)
        return 1

    uploads = build_uploads(files, extract_text=not args.names_only)
    result = get_matcher().validate(args.require, uploads)
    payload = json.dumps(result.to_wire(), indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).parent.mkdir(parents=True, exist_ok=True)
        Path(args.output).write_text(payload, encoding="utf-8")
        logger.info("Output written to: %s", args.output)
    else:
        print(payload)

    return 0 if result.valid else 2


if __name__ == "__main__":
    sys.exit(main())
