"""
Data structures shared by all decoder adapters.
"""

from __future__ import annotations

from dataclasses import dataclass

from geometry import Corners


@dataclass(frozen=True)
class DecodedSymbol:
    """One code found by a decoder backend, before block tagging.

    Attributes:
        symbology: Backend's name for the code type (e.g. "QRCODE", "EAN13").
        payload: Decoded text.
        corners: Pixel corners in the fixed c1..c4 order (see geometry).
    """

    symbology: str
    payload: str
    corners: Corners
