"""Command-line entry point for imagecache."""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .codegen.cli_integration import create_codegen_subparsers
from .logging_config import get_logger, setup_logging

logger = get_logger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="imagecache",
        description="Expand @ImageCache attributes in Swift source",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  imagecache expand Profile.swift --platform ios
  imagecache check Sources/Models/Profile.swift
  imagecache list-macros
  imagecache macro-info ImageCache
        """.strip(),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Console log level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write DEBUG logs to this file")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    create_codegen_subparsers(subparsers)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI.

    Args:
        argv: Arguments without the program name (defaults to ``sys.argv[1:]``).

    Returns:
        Process exit code.
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    setup_logging(args.log_level, args.log_file)
    logger.debug("Parsed arguments: %s", args)

    if not getattr(args, "func", None):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
