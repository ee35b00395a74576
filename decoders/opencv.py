"""OpenCV decoder adapter (QRCodeDetector and barcode.BarcodeDetector)."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, ClassVar, Mapping

import cv2
import numpy as np

import config
from errors import DecoderError
from geometry import Corners, Point

from .types import DecodedSymbol

logger = logging.getLogger(__name__)


def _quad(points: np.ndarray) -> list[Point]:
    return [Point(float(x), float(y)) for x, y in np.asarray(points).reshape(4, 2)]


def _qr_symbol(text: str, quad: np.ndarray) -> DecodedSymbol:
    # QRCodeDetector orders vertices top-left, top-right, bottom-right, bottom-left
    top_left, top_right, bottom_right, bottom_left = _quad(quad)
    return DecodedSymbol(
        symbology="QRCODE",
        payload=text,
        corners=Corners(top_right, top_left, bottom_left, bottom_right),
    )


@dataclass
class OpenCVDecoder:
    """Decoder backed by OpenCV's built-in detectors.

    Options:
        readers: Which detectors to run, in order ("qrcode", "barcode").
    """

    name: ClassVar[str] = "opencv"

    def decode(self, gray: np.ndarray, options: Mapping[str, Any]) -> list[DecodedSymbol]:
        if gray.ndim != 2:
            raise DecoderError("Expected grayscale image (1 channel)")

        readers = options.get("readers") or config.OPENCV_READERS
        symbols: list[DecodedSymbol] = []
        for reader in readers:
            if reader == "qrcode":
                symbols.extend(self._decode_qrcodes(gray))
            elif reader == "barcode":
                symbols.extend(self._decode_barcodes(gray))
            else:
                raise DecoderError(f"Unknown OpenCV reader: {reader}")
        return symbols

    def _decode_qrcodes(self, gray: np.ndarray) -> list[DecodedSymbol]:
        """Decode QR codes, falling back to the single-code detector.

        detectAndDecodeMulti misses some lone upright codes that
        detectAndDecode reads, so the single detector runs whenever the
        multi detector decodes nothing.
        """
        detector = cv2.QRCodeDetector()
        try:
            found, texts, points, _ = detector.detectAndDecodeMulti(gray)
            if found and points is not None:
                symbols = [
                    _qr_symbol(text, quad)
                    for text, quad in zip(texts, points)
                    # Located but undecodable codes come back with empty text
                    if text
                ]
                if symbols:
                    return symbols

            text, quad, _ = detector.detectAndDecode(gray)
        except cv2.error as e:
            raise DecoderError(f"OpenCV QR detection failed: {e}") from e
        if not text or quad is None:
            return []
        logger.debug("OpenCV multi QR detector found nothing, single detector decoded one")
        return [_qr_symbol(text, quad)]

    def _decode_barcodes(self, gray: np.ndarray) -> list[DecodedSymbol]:
        barcode_module = getattr(cv2, "barcode", None)
        if barcode_module is None:
            raise DecoderError(
                "OpenCV barcode module is not available in this OpenCV build"
            )
        detector = barcode_module.BarcodeDetector()
        decode = getattr(detector, "detectAndDecodeWithType", None) or detector.detectAndDecode
        try:
            found, texts, types, points = decode(gray)
        except cv2.error as e:
            raise DecoderError(f"OpenCV barcode detection failed: {e}") from e
        if not found or points is None:
            return []

        symbols = []
        for text, kind, quad in zip(texts, types, points):
            if not text:
                continue
            # BarcodeDetector orders vertices bottom-left, top-left, top-right, bottom-right
            bottom_left, top_left, top_right, bottom_right = _quad(quad)
            symbols.append(DecodedSymbol(
                symbology=str(kind),
                payload=text,
                corners=Corners(top_right, top_left, bottom_left, bottom_right),
            ))
        logger.debug("OpenCV barcode detector decoded %d symbol(s)", len(symbols))
        return symbols
