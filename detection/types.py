"""
Type definitions for the detection module.

A decoded code moves through three stages within one read:

    RawDetection -> MergedDetection -> NormalizedDetection

Raw detections are tagged with the block that produced them, merged
detections collapse duplicates across blocks, and normalized detections
carry resolution-independent geometry for the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal, Mapping

from geometry import Corners, Point

# Block scheduling modes
ExecutionMode = Literal["parallel", "sequential"]


@dataclass(frozen=True)
class Block:
    """One configured decode attempt: preprocessing + decoder + options.

    Attributes:
        decoder: Decoder kind ("zbar", "zxing", "opencv").
        preprocessing: Preprocessing method ("original", "histogram", "otsu").
        options: Decoder-specific options. Stored read-only.
    """

    decoder: str
    preprocessing: str = "original"
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if isinstance(self.options, Mapping):
            object.__setattr__(self, "options", MappingProxyType(dict(self.options)))

    @property
    def tag(self) -> str:
        """Identifier reported in detected_by, e.g. "zxing_histogram"."""
        return f"{self.decoder}_{self.preprocessing}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "decoder": self.decoder,
            "preprocessing": self.preprocessing,
            "options": dict(self.options),
        }

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> Block:
        """Create a Block from a mapping with decoder/preprocessing/options keys.

        Validation happens later in ReaderConfig.validate(); this only
        copies fields.
        """
        return cls(
            decoder=d.get("decoder"),
            preprocessing=d.get("preprocessing", "original"),
            options=d.get("options") or {},
        )


@dataclass(frozen=True)
class RawDetection:
    """A code decoded by a single block.

    Attributes:
        symbology: Code type as reported by the decoder (e.g. "EAN13").
        payload: Decoded text. This is the deduplication key.
        corners: Pixel corners in the fixed c1..c4 order.
        block_index: Position of the producing block in the block list.
        tag: Producing block's tag ("<decoder>_<preprocessing>").
    """

    symbology: str
    payload: str
    corners: Corners
    block_index: int
    tag: str


@dataclass
class MergedDetection:
    """A payload seen by one or more blocks.

    symbology, payload, corners and block_index always come from the
    contributing raw detection with the lowest block index. detected_by
    holds every contributing tag once, in first-seen order.
    """

    symbology: str
    payload: str
    corners: Corners
    block_index: int
    detected_by: list[str] = field(default_factory=list)

    @classmethod
    def from_raw(cls, raw: RawDetection) -> MergedDetection:
        return cls(
            symbology=raw.symbology,
            payload=raw.payload,
            corners=raw.corners,
            block_index=raw.block_index,
            detected_by=[raw.tag],
        )


@dataclass(frozen=True)
class OrientedBox:
    """Rotated box in normalized image coordinates.

    Attributes:
        angle: Rotation in degrees, positive for clockwise tilt.
        center: Box center, each coordinate in [0, 1] for in-image codes.
        width: Width as a fraction of image width.
        height: Height as a fraction of image height.
    """

    angle: float
    center: Point
    width: float
    height: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "angle": self.angle,
            "center": {"x": self.center.x, "y": self.center.y},
            "size": {"width": self.width, "height": self.height},
        }


@dataclass(frozen=True)
class NormalizedDetection:
    """Final, resolution-independent result for one code.

    Attributes:
        format: Code type of the winning (lowest-index) detection.
        value: Decoded text.
        box: Oriented bounding box in normalized coordinates.
        corners: Normalized corners ordered top-left, bottom-left,
            bottom-right, top-right.
        detected_by: Tags of every block that decoded this value.
    """

    format: str
    value: str
    box: OrientedBox
    corners: tuple[Point, Point, Point, Point]
    detected_by: tuple[str, ...]

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON result shape (camelCase detectedBy)."""
        return {
            "format": self.format,
            "value": self.value,
            "box": self.box.to_dict(),
            "corners": [{"x": p.x, "y": p.y} for p in self.corners],
            "detectedBy": list(self.detected_by),
        }
