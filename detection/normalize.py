"""
Geometric normalization of merged detections.

Converts pixel corners into an oriented box and corner list expressed as
fractions of the image size, so results are comparable across resolutions.
"""

from __future__ import annotations

import math

from geometry import Point, distance, midpoint, scale_point

from .types import MergedDetection, NormalizedDetection, OrientedBox


def rotation_angle(top_right: Point, bottom_right: Point) -> float:
    """Tilt of the right edge from vertical, in degrees.

    Computed as ``-atan(dx / dy)`` over the edge bottom_right -> top_right,
    so a clockwise rotation of the code gives a positive angle.

    A horizontal right edge (dy == 0) has no finite ratio. It resolves to the
    limit of the formula as dy rises to 0 (upright codes have dy < 0): +90
    when top_right lies right of bottom_right, -90 when it lies left.
    Coincident corners give 0.
    """
    dx = top_right.x - bottom_right.x
    dy = top_right.y - bottom_right.y
    if dy == 0:
        if dx == 0:
            return 0.0
        return 90.0 if dx > 0 else -90.0
    # + 0.0 turns a -0.0 result into 0.0
    return -math.degrees(math.atan(dx / dy)) + 0.0


def normalize_detection(
    detection: MergedDetection,
    image_width: int,
    image_height: int,
) -> NormalizedDetection:
    """Convert a merged detection to normalized image coordinates.

    Pure function: identical corners and dimensions always give an
    identical result.

    Width is the top edge |c2 c1| over the image width and height is the
    right edge |c4 c1| over the image height. The older rotation code paired
    the edges the other way round (an upright 240x200 code in a 640x480
    image came out 200/640 wide); the edge-per-axis definition is used here,
    so an upright code of 240x200 pixels is 0.375 wide and 0.4167 high.

    Args:
        detection: Merged detection with pixel corners (c1..c4 order).
        image_width: Width of the source image in pixels.
        image_height: Height of the source image in pixels.

    Returns:
        NormalizedDetection with center, size and corners divided by the
        image dimensions (x by width, y by height).

    Raises:
        ValueError: If either dimension is not positive.
    """
    if image_width <= 0 or image_height <= 0:
        raise ValueError(
            f"Image dimensions must be positive, got {image_width}x{image_height}"
        )

    c1, c2, c3, c4 = detection.corners

    center = midpoint(c1, c3)
    box = OrientedBox(
        angle=rotation_angle(c1, c4),
        center=scale_point(center, image_width, image_height),
        width=distance(c2, c1) / image_width,
        height=distance(c4, c1) / image_height,
    )

    corners = tuple(
        scale_point(p, image_width, image_height) for p in (c2, c3, c4, c1)
    )

    return NormalizedDetection(
        format=detection.symbology,
        value=detection.payload,
        box=box,
        corners=corners,
        detected_by=tuple(detection.detected_by),
    )
