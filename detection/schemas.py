"""Pydantic schemas for the JSON result format.

These define the exact wire shape of a read result. The domain types live
in detection.types; from_detection() converts between the two.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from .types import NormalizedDetection


class PointOut(BaseModel):
    x: float
    y: float


class SizeOut(BaseModel):
    width: float
    height: float


class BoxOut(BaseModel):
    """Oriented box in normalized coordinates."""
    angle: float
    center: PointOut
    size: SizeOut


class ResultOut(BaseModel):
    """One decoded code."""
    format: str
    value: str
    box: BoxOut
    corners: list[PointOut] = Field(min_length=4, max_length=4)
    detectedBy: list[str] = Field(min_length=1)

    @classmethod
    def from_detection(cls, detection: NormalizedDetection) -> ResultOut:
        return cls.model_validate(detection.to_dict())


class ImageResultsOut(BaseModel):
    """Results for one image of a CLI run."""
    source: str
    results: list[ResultOut] = Field(default_factory=list)
