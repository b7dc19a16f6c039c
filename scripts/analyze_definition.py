#!/usr/bin/env python3
"""Analyze an OpenAPI/Swagger definition file and print the report.

Usage:
    python scripts/analyze_definition.py path/to/openapi.json
    python scripts/analyze_definition.py path/to/openapi.yaml --no-workers
    python scripts/analyze_definition.py big.json --min-size 0

This will:
1. Load the definition (JSON or YAML)
2. Run the full analysis (isolated units for large definitions)
3. Print the report as JSON to stdout
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from oas_analyzer.analyzer.service import get_analyzer
from oas_analyzer.config import resolve_parallel_options
from oas_analyzer.documents.loader import load_document
from oas_analyzer.errors import AnalyzerError

logger = logging.getLogger("analyze_definition")


def non_negative_int(value: str) -> int:
    """argparse type for sizes: an integer >= 0."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Analyze an API definition for feature usage")
    parser.add_argument("path", type=Path, help="JSON or YAML definition file")
    parser.add_argument("--no-workers", action="store_true", help="Always run queries sequentially")
    parser.add_argument("--min-size", type=non_negative_int, default=None, help="Size threshold for isolated units")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def main(argv=None):
    """Analyze one definition file."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if not args.path.exists():
        print(f"File not found: {args.path}", file=sys.stderr)
        sys.exit(1)

    document = load_document(args.path)
    logger.debug(f"Loaded {args.path} ({len(document)} top-level keys)")
    options = resolve_parallel_options(
        use_workers=False if args.no_workers else None,
        min_size_for_workers=args.min_size,
    )

    analyzer = get_analyzer()
    try:
        report = asyncio.run(analyzer.analyze(document, options))
    except AnalyzerError as e:
        print(f"Analysis failed: {e}", file=sys.stderr)
        sys.exit(2)

    print(json.dumps(report.model_dump(mode="json"), indent=2))


if __name__ == "__main__":
    main()
