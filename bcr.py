#!/usr/bin/env python3
"""
Unified CLI for the Barcode Reader.

Usage:
    bcr read <image>...                     # Decode codes with the default blocks
    bcr read <dir> --mode sequential        # Stop at the first block that finds a code
    bcr read <image> -b zxing -b zbar:otsu  # Use an explicit block list
    bcr read <image> --config reader.yaml   # Load blocks and mode from YAML
    bcr blocks                              # List decoders and preprocessing methods
"""

import argparse
import logging
import sys

from logging_utils import configure_logging, add_logging_args
from cli.read import add_read_subparser
from cli.blocks import add_blocks_subparser

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bcr",
        description="Barcode Reader - decode barcodes and QR codes with multiple decoder blocks",
    )
    add_logging_args(parser)
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    add_read_subparser(subparsers)
    add_blocks_subparser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level, args.verbose, args.quiet)

    if args.command is None:
        parser.print_help()
        return 1

    cmd = getattr(args, "_cmd", None)
    if cmd is None:
        parser.print_help()
        return 1
    return cmd(args)


if __name__ == "__main__":
    sys.exit(main())
