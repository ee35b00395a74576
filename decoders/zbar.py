"""ZBar decoder adapter (via pyzbar)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Mapping

import numpy as np
from pyzbar import pyzbar

import config
from errors import DecoderError
from geometry import Corners, Point, rect_to_corners

from .types import DecodedSymbol


def _symbol_corners(result: pyzbar.Decoded) -> Corners:
    """Map a ZBar location polygon onto the c1..c4 corner order.

    ZBar reports location points counter-clockwise from the top-left:
    top-left, bottom-left, bottom-right, top-right. Linear symbols can come
    back with more or fewer than four points; those fall back to the
    bounding rectangle.
    """
    polygon = result.polygon
    if len(polygon) != 4:
        rect = result.rect
        return rect_to_corners(rect.left, rect.top, rect.width, rect.height)
    top_left, bottom_left, bottom_right, top_right = (
        Point(float(p.x), float(p.y)) for p in polygon
    )
    return Corners(
        top_right=top_right,
        top_left=top_left,
        bottom_left=bottom_left,
        bottom_right=bottom_right,
    )


def _resolve_symbols(names) -> list[pyzbar.ZBarSymbol] | None:
    if not names:
        return None
    try:
        return [pyzbar.ZBarSymbol[str(name).upper()] for name in names]
    except KeyError as e:
        raise DecoderError(f"Unknown ZBar symbol: {e.args[0]}") from e


@dataclass
class ZBarDecoder:
    """Decoder backed by the ZBar library."""

    name: ClassVar[str] = "zbar"

    def decode(self, gray: np.ndarray, options: Mapping[str, Any]) -> list[DecodedSymbol]:
        if gray.ndim != 2:
            raise DecoderError("Expected grayscale image (1 channel)")
        symbols = _resolve_symbols(options.get("symbols", config.ZBAR_SYMBOLS))
        results = pyzbar.decode(gray, symbols=symbols)
        return [
            DecodedSymbol(
                symbology=result.type,
                payload=result.data.decode("utf-8", errors="replace"),
                corners=_symbol_corners(result),
            )
            for result in results
        ]
