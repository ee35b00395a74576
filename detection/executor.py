"""
Block executor: runs preprocessing + decoding for each configured block.

Every block evaluation is submitted to a thread pool and handled as a
Future, whatever the mode:

- parallel: all blocks are submitted at once and the executor waits for
  every one of them. Results are concatenated in block order.
- sequential: blocks are submitted one at a time in list order. The first
  block that yields detections ends the run; later blocks are never started.

A block that raises is logged as a warning and contributes no detections.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Callable, Sequence

import config
from decoders import DecoderAdapter, get_decoder_by_name, get_decoder_spec
from errors import ConfigurationError
from images import ImageFrame
from preprocessing import get_preprocessor

from .types import Block, ExecutionMode, RawDetection

logger = logging.getLogger(__name__)

# Returns a ready decoder adapter for a decoder kind
DecoderProvider = Callable[[str], DecoderAdapter]


def run_block(
    frame: ImageFrame,
    block: Block,
    block_index: int,
    decoder_provider: DecoderProvider = get_decoder_by_name,
) -> list[RawDetection]:
    """Preprocess and decode a frame with one block.

    Args:
        frame: Source image. Never modified.
        block: Block configuration.
        block_index: Position of the block, recorded on each detection.
        decoder_provider: Resolves the block's decoder kind to an adapter.

    Returns:
        Detections tagged with the block index and tag, in decoder order.

    Raises:
        Any exception from preprocessing or decoding; the caller decides
        whether it is recoverable.
    """
    started = time.perf_counter()
    gray = get_preprocessor(block.preprocessing).run(frame).final

    decoder = decoder_provider(block.decoder)
    symbols = decoder.decode(gray, block.options)

    detections = [
        RawDetection(
            symbology=symbol.symbology,
            payload=symbol.payload,
            corners=symbol.corners,
            block_index=block_index,
            tag=block.tag,
        )
        for symbol in symbols
    ]
    logger.debug(
        "Block %d (%s) found %d code(s) in %.1f ms",
        block_index, block.tag, len(detections),
        (time.perf_counter() - started) * 1000,
    )
    return detections


def _collect(future: Future, block_index: int, block: Block) -> list[RawDetection]:
    """Resolve a block's future, downgrading any failure to a warning."""
    try:
        return future.result()
    except Exception as e:
        logger.warning("Block %d (%s) failed: %s", block_index, block.decoder, e)
        return []


def validate_blocks(blocks: Sequence[Block], mode: str) -> None:
    """Reject configurations that make the whole read meaningless.

    Raises:
        ConfigurationError: If there are no blocks, the mode is unknown, or a
            block names an unknown decoder or preprocessing method.
    """
    if not blocks:
        raise ConfigurationError("No decoder blocks configured")
    if mode not in config.EXECUTION_MODES:
        raise ConfigurationError(
            f"Unknown execution mode: {mode!r}. "
            f"Expected one of {list(config.EXECUTION_MODES)}"
        )
    for block in blocks:
        get_decoder_spec(block.decoder)
        get_preprocessor(block.preprocessing)


def run_blocks(
    frame: ImageFrame,
    blocks: Sequence[Block],
    mode: ExecutionMode = config.DEFAULT_EXECUTION_MODE,
    decoder_provider: DecoderProvider = get_decoder_by_name,
    max_workers: int | None = config.MAX_PARALLEL_WORKERS,
) -> list[RawDetection]:
    """Run blocks against a frame under the given execution mode.

    Args:
        frame: Source image.
        blocks: Ordered block list.
        mode: "parallel" or "sequential".
        decoder_provider: Resolves decoder kinds to adapters.
        max_workers: Thread cap for parallel mode (None = one per block).

    Returns:
        Raw detections (parallel: all blocks in block order; sequential: the
        first non-empty block's detections, or an empty list).

    Raises:
        ConfigurationError: See validate_blocks().
    """
    validate_blocks(blocks, mode)
    if mode == "sequential":
        return _run_sequential(frame, blocks, decoder_provider)
    return _run_parallel(frame, blocks, decoder_provider, max_workers)


def _run_parallel(
    frame: ImageFrame,
    blocks: Sequence[Block],
    decoder_provider: DecoderProvider,
    max_workers: int | None,
) -> list[RawDetection]:
    workers = max_workers or len(blocks)
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="block") as pool:
        futures = [
            pool.submit(run_block, frame, block, index, decoder_provider)
            for index, block in enumerate(blocks)
        ]
        wait(futures)

    detections: list[RawDetection] = []
    for index, (block, future) in enumerate(zip(blocks, futures)):
        detections.extend(_collect(future, index, block))

    logger.debug("Parallel run: %d block(s), %d raw detection(s)", len(blocks), len(detections))
    return detections


def _run_sequential(
    frame: ImageFrame,
    blocks: Sequence[Block],
    decoder_provider: DecoderProvider,
) -> list[RawDetection]:
    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="block") as pool:
        for index, block in enumerate(blocks):
            future = pool.submit(run_block, frame, block, index, decoder_provider)
            detections = _collect(future, index, block)
            if detections:
                logger.debug("Sequential run stopped at block %d (%s)", index, block.tag)
                return detections

    logger.debug("Sequential run: no block produced detections")
    return []
