"""Blocks command: list available decoders and preprocessing methods."""

from __future__ import annotations

import argparse
import logging
import sys

from decoders import DECODER_NAMES, get_decoder_spec
from detection import default_blocks
from preprocessing import PREPROCESSING_METHODS, describe_method

logger = logging.getLogger(__name__)


def add_blocks_subparser(subparsers: argparse._SubParsersAction) -> None:
    blocks_parser = subparsers.add_parser(
        "blocks",
        help="List decoders, preprocessing methods and the default block list",
    )
    blocks_parser.set_defaults(_cmd=cmd_blocks)


def cmd_blocks(args: argparse.Namespace) -> int:
    out = sys.stdout
    out.write("Decoders:\n")
    for name in DECODER_NAMES:
        spec = get_decoder_spec(name)
        options = ", ".join(spec.options) or "-"
        out.write(f"  {name:<8} requires {spec.requirement:<14} options: {options}\n")

    out.write("\nPreprocessing methods:\n")
    for method in PREPROCESSING_METHODS:
        steps = " -> ".join(describe_method(method)["steps"])
        out.write(f"  {method:<10} {steps}\n")

    out.write("\nDefault blocks:\n")
    for index, block in enumerate(default_blocks()):
        options = dict(block.options) or ""
        out.write(f"  {index}: {block.tag} {options}\n".rstrip() + "\n")
    return 0
