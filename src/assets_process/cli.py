# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Assets Process CLI: rewrite the exported site in ./out for edge hosting.

Usage:
    python -m assets_process.cli [--out-dir DIR] [--package-json PATH] [--translations PATH]
                                 [--brand NAME] [--inline-css] [--strict] [--json-logs] [-v]

Run with no arguments after ``next build`` to process ``./out`` in place.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from assets_process.config import ProcessorConfig
from assets_process.errors import TranslationLoadError
from assets_process.logging_config import configure
from assets_process.pipeline import AssetsProcessor

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Inline assets and stamp metadata into exported HTML pages",
        prog="python -m assets_process.cli",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
examples:
  %(prog)s                                Process ./out in place
  %(prog)s --out-dir dist --brand Example Process dist/ with a custom brand
  %(prog)s --inline-css                   Also inline root-relative stylesheets""",
    )
    parser.add_argument("--out-dir", type=Path, metavar="DIR", help="Build output directory (default: ./out)")
    parser.add_argument("--package-json", type=Path, metavar="PATH", help="package.json to read the version from")
    parser.add_argument("--translations", type=Path, metavar="PATH", help="JSON file overriding page copy")
    parser.add_argument("--brand", type=str, metavar="NAME", help="Brand appended to page titles")
    parser.add_argument(
        "--inline-css",
        action="store_true",
        default=None,
        help="Inline root-relative stylesheets as data URIs",
    )
    parser.add_argument("--strict", action="store_true", help="Exit 1 if any file failed")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    configure(json_output=args.json_logs, level="DEBUG" if args.verbose else "INFO")

    config = ProcessorConfig.from_env().replace(
        out_dir=args.out_dir,
        package_json=args.package_json,
        translations_path=args.translations,
        brand=args.brand,
        inline_css=args.inline_css,
    )

    try:
        processor = AssetsProcessor.from_config(config)
    except TranslationLoadError as e:
        logger.error("Error: %s", e)
        return 2

    report = processor.run()
    if args.strict and report.failed:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
