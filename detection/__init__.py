"""
Barcode detection module.

Runs configured blocks (preprocessing + decoder) against an image, merges
their results by payload, and reports resolution-independent geometry.

Key components:
- types: Core data structures (Block, RawDetection, MergedDetection, NormalizedDetection)
- config: ReaderConfig (block list + execution mode), YAML loading
- executor: Parallel and sequential block execution
- dedup: Payload-keyed merging across blocks
- normalize: Pixel corners to oriented box in [0, 1] coordinates
- reader: read_codes() / read_batch() entry points
- schemas: Pydantic models for the JSON result format

The main entry point is `read_codes()` which returns a list of
`NormalizedDetection`.
"""

from .types import (
    Block,
    ExecutionMode,
    RawDetection,
    MergedDetection,
    NormalizedDetection,
    OrientedBox,
)
from .config import ReaderConfig, default_blocks, load_reader_config, parse_block_spec
from .executor import run_block, run_blocks, validate_blocks
from .dedup import merge_detections
from .normalize import normalize_detection, rotation_angle
from .reader import read_codes, read_batch

__all__ = [
    "Block",
    "ExecutionMode",
    "RawDetection",
    "MergedDetection",
    "NormalizedDetection",
    "OrientedBox",
    "ReaderConfig",
    "default_blocks",
    "load_reader_config",
    "parse_block_spec",
    "run_block",
    "run_blocks",
    "validate_blocks",
    "merge_detections",
    "normalize_detection",
    "rotation_angle",
    "read_codes",
    "read_batch",
]
