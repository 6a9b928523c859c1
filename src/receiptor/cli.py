"""
cli.py

Command-line interface for receiptor.

The image path comes from the positional argument, or else from the first
whitespace-delimited token on stdin. On success the output path is printed
to stdout; errors go to stderr with a distinct exit status.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from .errors import LoadError, SaveError
from .pipeline import optimize_image_for_ocr

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_LOAD_ERROR = 3
EXIT_SAVE_ERROR = 4


def read_input_path(stream: TextIO) -> Optional[Path]:
    """First whitespace-delimited token of `stream`, or None if there is none."""
    tokens = stream.read().split()
    if not tokens:
        return None
    return Path(tokens[0])


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="receiptor",
        description="Grayscale + threshold a receipt scan for OCR",
    )
    parser.add_argument(
        "input",
        nargs="?",
        help="path to the receipt image (read from stdin when omitted)",
    )
    parser.add_argument(
        "--output-dir",
        help="directory for the processed image (default: system temp dir)",
    )
    parser.add_argument(
        "--debug-dir",
        help="also write the grayscale image and a JSON meta file here",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    input_path = Path(args.input) if args.input else read_input_path(sys.stdin)
    if input_path is None:
        print("error: no image path given on stdin or command line", file=sys.stderr)
        return EXIT_USAGE

    try:
        result = optimize_image_for_ocr(
            input_path,
            output_dir=args.output_dir,
            debug_dir=args.debug_dir,
        )
    except LoadError as exc:
        logger.debug("load failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_LOAD_ERROR
    except SaveError as exc:
        logger.debug("save failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_SAVE_ERROR

    print(result.output_path)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
