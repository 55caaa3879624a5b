"""
Command Line Interface
======================

Render a flag definition to a PNG file:

    flagrant "(h 1 (s w) 2 (v 1 (s r) 1 (s g)))" -o flag.png

Exit status is 0 on success, 1 for an invalid definition and 2 when the
image cannot be written.
"""

import argparse
import sys
from typing import List, Optional

from flagrant import __version__
from flagrant.config.logging import get_logger, setup_logging
from flagrant.config.settings import Settings, get_settings
from flagrant.core.dsl.parser import get_supported_colors
from flagrant.core.errors import FlagError, ImageWriteError
from flagrant.core.pipeline import FlagPipeline
from flagrant.models.schemas import RenderOptions

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_IO = 2


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    """Build the argument parser; defaults come from settings."""
    colors = ", ".join(f"{letter}={name}" for letter, name in get_supported_colors().items())
    parser = argparse.ArgumentParser(
        prog="flagrant",
        description="Render a flag definition S-expression to a PNG image.",
        epilog=f"Forms: (s C) (h A B P) (v A B P) (h W A W B ...) (t NAME A) (r NAME). "
        f"Colors: {colors}",
    )
    parser.add_argument("definition", help="Flag definition; may span several lines")
    parser.add_argument(
        "-o", "--output", type=str, default=None,
        help=f"Output PNG path (default: {settings.output_path})",
    )
    parser.add_argument(
        "--width", type=int, default=None,
        help=f"Canvas width in pixels (default: {settings.default_width})",
    )
    parser.add_argument(
        "--height", type=int, default=None,
        help=f"Canvas height in pixels (default: {settings.default_height})",
    )
    parser.add_argument(
        "--check", action="store_true", help="Only validate the definition, write nothing"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Command line entry point."""
    settings = get_settings()
    parser = build_parser(settings)
    args = parser.parse_args(argv)

    if args.verbose:
        setup_logging("DEBUG")

    pipeline = FlagPipeline(settings)

    if args.check:
        validation = pipeline.validate(args.definition)
        if not validation.valid:
            for error in validation.errors:
                print(f"error: {error}", file=sys.stderr)
            return EXIT_INVALID
        print("ok")
        return EXIT_OK

    try:
        options = RenderOptions.from_settings(
            settings, width=args.width, height=args.height, output_path=args.output
        )
    except ValueError as e:
        parser.error(str(e))

    try:
        result = pipeline.run(args.definition, options)
    except ImageWriteError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_IO
    except FlagError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_INVALID

    logger.debug("Render metadata", **result.metadata)
    print(f"wrote {result.output_path} ({result.width}x{result.height})")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
