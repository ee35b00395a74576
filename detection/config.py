"""
Configuration for a barcode read: the block list and the execution mode.

ReaderConfig is immutable and validated before any block runs, so every
configuration problem surfaces as a ConfigurationError up front rather than
as per-block warnings.

YAML format::

    mode: sequential
    blocks:
      - decoder: zxing
        preprocessing: original
      - decoder: zxing
        preprocessing: histogram
        options:
          try_harder: true
      - decoder: zbar
        preprocessing: otsu
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

import config
from decoders import validate_decoder_options
from errors import ConfigurationError

from .executor import validate_blocks
from .types import Block, ExecutionMode


def default_blocks() -> tuple[Block, ...]:
    """Blocks from config.DEFAULT_BLOCKS."""
    return tuple(
        Block(decoder=decoder, preprocessing=preprocessing, options=options)
        for decoder, preprocessing, options in config.DEFAULT_BLOCKS
    )


@dataclass(frozen=True)
class ReaderConfig:
    """Immutable configuration for reading codes from images.

    Attributes:
        blocks: Ordered decode attempts.
        mode: "parallel" (run all, merge) or "sequential" (stop at first hit).
        max_workers: Thread cap for parallel mode (None = one per block).
    """

    blocks: tuple[Block, ...] = field(default_factory=default_blocks)
    mode: ExecutionMode = config.DEFAULT_EXECUTION_MODE
    max_workers: int | None = config.MAX_PARALLEL_WORKERS

    def validate(self) -> None:
        """Validate configuration parameters.

        Raises:
            ConfigurationError: If any parameter is invalid.
        """
        validate_blocks(self.blocks, self.mode)

        for index, block in enumerate(self.blocks):
            if not isinstance(block.options, Mapping):
                raise ConfigurationError(
                    f"Block {index} options must be a mapping, "
                    f"got {type(block.options).__name__}"
                )
            validate_decoder_options(block.decoder, block.options)

        workers = self.max_workers
        if workers is not None:
            if not isinstance(workers, int) or isinstance(workers, bool):
                raise ConfigurationError(
                    f"max_workers must be an integer, got {type(workers).__name__}"
                )
            if workers <= 0:
                raise ConfigurationError(f"max_workers must be positive, got {workers}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ReaderConfig:
        """Build a config from parsed YAML/JSON data.

        Raises:
            ConfigurationError: If the structure is not as documented.
        """
        if not isinstance(data, Mapping):
            raise ConfigurationError("Reader config must be a mapping")

        raw_blocks = data.get("blocks")
        if raw_blocks is None:
            raise ConfigurationError("Reader config is missing required 'blocks' key")
        if not isinstance(raw_blocks, list):
            raise ConfigurationError("'blocks' must be a list")

        blocks = []
        for index, raw in enumerate(raw_blocks):
            if not isinstance(raw, Mapping):
                raise ConfigurationError(f"Block {index} must be a mapping")
            if not raw.get("decoder"):
                raise ConfigurationError(f"Block {index} is missing 'decoder'")
            blocks.append(Block.from_dict(raw))

        return cls(
            blocks=tuple(blocks),
            mode=data.get("mode", config.DEFAULT_EXECUTION_MODE),
            max_workers=data.get("max_workers", config.MAX_PARALLEL_WORKERS),
        )


def load_reader_config(path: Path) -> ReaderConfig:
    """Parse and validate a YAML reader config file.

    Raises:
        ConfigurationError: If the file cannot be read or is invalid.
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read reader config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in reader config {path}: {e}") from e

    reader_config = ReaderConfig.from_dict(data or {})
    reader_config.validate()
    return reader_config


def parse_block_spec(text: str) -> Block:
    """Parse a "decoder[:preprocessing]" shorthand, e.g. "zxing:histogram".

    Raises:
        ConfigurationError: If the shorthand is malformed.
    """
    parts = text.split(":")
    if len(parts) > 2 or not parts[0]:
        raise ConfigurationError(
            f"Invalid block {text!r}: expected DECODER or DECODER:PREPROCESSING"
        )
    if len(parts) == 1:
        return Block(decoder=parts[0])
    return Block(decoder=parts[0], preprocessing=parts[1] or "original")
