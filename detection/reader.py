"""
Top-level read orchestration.

Ties together image loading, block execution, deduplication and
normalization:

    image -> run_blocks -> merge_detections -> normalize_detection
"""

from __future__ import annotations

import logging
from typing import Iterable

from decoders import get_decoder_by_name
from images import ImageSource, load_image

from .config import ReaderConfig
from .dedup import merge_detections
from .executor import DecoderProvider, run_blocks
from .normalize import normalize_detection
from .types import NormalizedDetection

logger = logging.getLogger(__name__)


def read_codes(
    source: ImageSource,
    reader_config: ReaderConfig | None = None,
    decoder_provider: DecoderProvider = get_decoder_by_name,
) -> list[NormalizedDetection]:
    """Decode every code in one image.

    Args:
        source: Image input (ndarray, encoded bytes, path, or raw bitmap).
        reader_config: Blocks and mode. Defaults to ReaderConfig().
        decoder_provider: Resolves decoder kinds to adapters.

    Returns:
        One NormalizedDetection per distinct payload, in first-seen order.

    Raises:
        ConfigurationError: If the configuration is invalid.
        InputError: If the image cannot be loaded or measured.
    """
    if reader_config is None:
        reader_config = ReaderConfig()
    reader_config.validate()

    frame = load_image(source)
    width, height = frame.dimensions

    raw = run_blocks(
        frame,
        reader_config.blocks,
        mode=reader_config.mode,
        decoder_provider=decoder_provider,
        max_workers=reader_config.max_workers,
    )
    merged = merge_detections(raw)
    logger.info(
        "Read %dx%d image: %d raw, %d unique code(s)",
        width, height, len(raw), len(merged),
    )
    return [normalize_detection(detection, width, height) for detection in merged]


def read_batch(
    sources: Iterable[ImageSource],
    reader_config: ReaderConfig | None = None,
    decoder_provider: DecoderProvider = get_decoder_by_name,
) -> list[list[NormalizedDetection]]:
    """Decode every image of a batch, one result list per image.

    Images are read one after another. Failures are not isolated: a fatal
    error on any image propagates and no results are returned for the
    batch, including images that were already read.
    """
    if reader_config is None:
        reader_config = ReaderConfig()
    return [read_codes(source, reader_config, decoder_provider) for source in sources]
