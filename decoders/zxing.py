"""ZXing decoder adapter (via zxing-cpp)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Mapping

import numpy as np
import zxingcpp

import config
from errors import DecoderError
from geometry import Corners

from .types import DecodedSymbol


def _result_corners(result) -> Corners:
    position = result.position
    return Corners.from_clockwise(
        (float(position.top_left.x), float(position.top_left.y)),
        (float(position.top_right.x), float(position.top_right.y)),
        (float(position.bottom_right.x), float(position.bottom_right.y)),
        (float(position.bottom_left.x), float(position.bottom_left.y)),
    )


@dataclass
class ZXingDecoder:
    """Decoder backed by zxing-cpp.

    Options:
        try_harder: Also search rotated and downscaled variants.
        formats: Restrict to these format names (e.g. ["QRCode", "EAN13"]).
    """

    name: ClassVar[str] = "zxing"

    def decode(self, gray: np.ndarray, options: Mapping[str, Any]) -> list[DecodedSymbol]:
        if gray.ndim != 2:
            raise DecoderError("Expected grayscale image (1 channel)")

        try_harder = bool(options.get("try_harder", config.ZXING_TRY_HARDER))
        kwargs: dict[str, Any] = {
            "try_rotate": try_harder,
            "try_downscale": try_harder,
        }
        formats = options.get("formats")
        if formats:
            try:
                kwargs["formats"] = zxingcpp.barcode_formats_from_str("|".join(formats))
            except ValueError as e:
                raise DecoderError(f"Invalid zxing formats {formats!r}: {e}") from e

        try:
            results = zxingcpp.read_barcodes(gray, **kwargs)
        except (RuntimeError, ValueError) as e:
            raise DecoderError(f"zxing-cpp failed: {e}") from e

        return [
            DecodedSymbol(
                symbology=result.format.name,
                payload=result.text,
                corners=_result_corners(result),
            )
            for result in results
        ]
