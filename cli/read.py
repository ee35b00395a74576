"""Read command CLI parsing and control flow."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from tqdm import tqdm

from detection import Block, ReaderConfig, default_blocks, load_reader_config, parse_block_spec, read_batch
from detection.schemas import ImageResultsOut, ResultOut
from errors import BarcodeReaderError
from sources import scan_local_images

logger = logging.getLogger(__name__)


def add_read_subparser(subparsers: argparse._SubParsersAction) -> None:
    read_parser = subparsers.add_parser(
        "read",
        help="Decode barcodes and QR codes in image files",
    )
    read_parser.add_argument(
        "sources",
        nargs="+",
        help="Image files or directories of images",
    )
    read_parser.add_argument(
        "-c", "--config",
        type=Path,
        help="YAML reader config with 'mode' and 'blocks'",
    )
    read_parser.add_argument(
        "-b", "--block",
        action="append",
        metavar="DECODER[:PREPROCESSING]",
        help="Add a block, e.g. zxing:histogram (repeatable, replaces config blocks)",
    )
    read_parser.add_argument(
        "-m", "--mode",
        choices=("parallel", "sequential"),
        help="Execution mode (default: from config, else parallel)",
    )
    read_parser.add_argument(
        "--try-harder",
        action="store_true",
        help="Enable try_harder on every zxing block (from --block, --config or the defaults)",
    )
    read_parser.add_argument(
        "-o", "--output",
        type=Path,
        help="Write JSON results to this file instead of stdout",
    )
    read_parser.add_argument(
        "--with-source",
        action="store_true",
        help="Wrap each image's results with its file path",
    )
    read_parser.set_defaults(_cmd=cmd_read)


def build_reader_config(args: argparse.Namespace) -> ReaderConfig:
    """Combine --config, --block, --mode and --try-harder into one config."""
    base = load_reader_config(args.config) if args.config else ReaderConfig()

    blocks = base.blocks
    if args.block:
        blocks = tuple(parse_block_spec(spec) for spec in args.block)
    elif not args.config:
        blocks = default_blocks()

    if args.try_harder:
        blocks = tuple(
            Block(block.decoder, block.preprocessing, {**block.options, "try_harder": True})
            if block.decoder == "zxing" else block
            for block in blocks
        )
        if not any(block.decoder == "zxing" for block in blocks):
            logger.warning("--try-harder has no effect: no zxing block configured")

    reader_config = ReaderConfig(
        blocks=blocks,
        mode=args.mode or base.mode,
        max_workers=base.max_workers,
    )
    reader_config.validate()
    return reader_config


def cmd_read(args: argparse.Namespace) -> int:
    try:
        reader_config = build_reader_config(args)
        paths = [path for source in args.sources for path in scan_local_images(source)]
        if not paths:
            logger.error("No images found in %s", ", ".join(args.sources))
            return 1

        logger.info(
            "Reading %d image(s) with %d block(s) in %s mode",
            len(paths), len(reader_config.blocks), reader_config.mode,
        )
        batch = read_batch(
            tqdm(paths, desc="Reading", unit="img", disable=len(paths) < 2),
            reader_config,
        )
    except BarcodeReaderError as exc:
        logger.error("%s", exc)
        return 1

    if args.with_source:
        payload = [
            ImageResultsOut(
                source=str(path),
                results=[ResultOut.from_detection(d) for d in detections],
            ).model_dump()
            for path, detections in zip(paths, batch)
        ]
    else:
        payload = [
            [ResultOut.from_detection(d).model_dump() for d in detections]
            for detections in batch
        ]
        # A single image gives a flat list, several images a nested one
        if len(args.sources) == 1 and len(paths) == 1:
            payload = payload[0]

    text = json.dumps(payload, indent=2, ensure_ascii=False)
    if args.output:
        args.output.write_text(text + "\n", encoding="utf-8")
        logger.info("Results written to %s", args.output)
    else:
        sys.stdout.write(text + "\n")
    return 0
