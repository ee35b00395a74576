"""
Cross-block deduplication of raw detections.

The deduplication key is the decoded payload alone. Two codes of different
symbologies that decode to the same text are reported once; this is the
intended behavior, not an oversight.
"""

from __future__ import annotations

from dataclasses import replace

from .types import MergedDetection, RawDetection


def merge_detections(raw: list[RawDetection]) -> list[MergedDetection]:
    """Merge raw detections that share a payload.

    Pure function: returns fresh MergedDetection objects in order of first
    occurrence. For each payload the symbology, corners and block index come
    from the lowest-index block that decoded it, while detected_by keeps
    accumulating every contributing tag.

    Args:
        raw: Raw detections in executor order (block order, then decoder order).

    Returns:
        One MergedDetection per distinct payload.
    """
    merged: dict[str, MergedDetection] = {}

    for detection in raw:
        existing = merged.get(detection.payload)
        if existing is None:
            merged[detection.payload] = MergedDetection.from_raw(detection)
            continue

        if detection.tag not in existing.detected_by:
            existing.detected_by.append(detection.tag)

        if detection.block_index < existing.block_index:
            merged[detection.payload] = replace(
                existing,
                symbology=detection.symbology,
                payload=detection.payload,
                corners=detection.corners,
                block_index=detection.block_index,
            )

    return list(merged.values())
