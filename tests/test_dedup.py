"""Tests for payload-keyed merging across blocks."""

from detection import RawDetection, merge_detections
from geometry import rect_to_corners


def raw(payload, symbology="QRCODE", index=0, tag="zxing_original", corners=None):
    return RawDetection(
        symbology=symbology,
        payload=payload,
        corners=corners or rect_to_corners(index * 10, 0, 10, 10),
        block_index=index,
        tag=tag,
    )


def test_lower_block_index_wins():
    merged = merge_detections([
        raw("123456", "CODE-128", index=1, tag="zbar_original"),
        raw("123456", "EAN-13", index=0, tag="zxing_original"),
    ])

    assert len(merged) == 1
    assert merged[0].symbology == "EAN-13"
    assert merged[0].block_index == 0
    assert merged[0].corners == rect_to_corners(0, 0, 10, 10)
    assert merged[0].detected_by == ["zbar_original", "zxing_original"]


def test_distinct_payloads_kept_in_first_seen_order():
    merged = merge_detections([raw("B"), raw("A"), raw("C")])
    assert [m.payload for m in merged] == ["B", "A", "C"]


def test_same_payload_different_symbology_collapses():
    merged = merge_detections([
        raw("ABC", "EAN13", index=0, tag="zxing_original"),
        raw("ABC", "QRCODE", index=1, tag="zbar_histogram"),
    ])
    assert len(merged) == 1
    assert merged[0].symbology == "EAN13"


def test_tag_recorded_once():
    merged = merge_detections([
        raw("X", index=0, tag="zxing_original"),
        raw("X", index=0, tag="zxing_original"),
        raw("X", index=2, tag="zbar_otsu"),
    ])
    assert merged[0].detected_by == ["zxing_original", "zbar_otsu"]


def test_empty_input():
    assert merge_detections([]) == []


def test_idempotent_on_merged_output():
    first = merge_detections([raw("A"), raw("A", index=1, tag="zbar_original"), raw("B")])
    again = merge_detections([
        raw(m.payload, m.symbology, m.block_index, tag, m.corners)
        for m in first
        for tag in m.detected_by
    ])
    assert [(m.payload, m.symbology, m.block_index, m.detected_by) for m in again] == [
        (m.payload, m.symbology, m.block_index, m.detected_by) for m in first
    ]


def test_input_not_mutated():
    detections = [raw("A"), raw("A", index=1, tag="zbar_original")]
    snapshot = list(detections)
    merge_detections(detections)
    assert detections == snapshot
