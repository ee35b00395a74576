"""Shared geometry utilities for code corner quadrilaterals.

Corners are always carried in one fixed order:

    c1 = top-right, c2 = top-left, c3 = bottom-left, c4 = bottom-right

Every decoder adapter maps its library's native point order onto this one
before a detection leaves the adapter.
"""

from __future__ import annotations

import math
from typing import NamedTuple


class Point(NamedTuple):
    """A 2D point (pixel or normalized coordinates)."""

    x: float
    y: float


class Corners(NamedTuple):
    """Four corners of a detected code in the fixed c1..c4 order."""

    top_right: Point
    top_left: Point
    bottom_left: Point
    bottom_right: Point

    @classmethod
    def from_clockwise(
        cls,
        top_left: tuple[float, float],
        top_right: tuple[float, float],
        bottom_right: tuple[float, float],
        bottom_left: tuple[float, float],
    ) -> Corners:
        """Build corners from the clockwise order most libraries report."""
        return cls(
            top_right=Point(*top_right),
            top_left=Point(*top_left),
            bottom_left=Point(*bottom_left),
            bottom_right=Point(*bottom_right),
        )


def rect_to_corners(x: float, y: float, w: float, h: float) -> Corners:
    """Convert an axis-aligned rectangle (x, y, w, h) to corners."""
    return Corners.from_clockwise(
        (x, y),
        (x + w, y),
        (x + w, y + h),
        (x, y + h),
    )


def midpoint(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)


def distance(a: Point, b: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(a.x - b.x, a.y - b.y)


def scale_point(p: Point, width: float, height: float) -> Point:
    """Map a pixel point into the [0, 1] frame of a width x height image."""
    return Point(p.x / width, p.y / height)
