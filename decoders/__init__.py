"""
Decoder adapters: one uniform interface over each decode backend.

Backends:
- zbar: ZBar via pyzbar
- zxing: zxing-cpp
- opencv: OpenCV QRCodeDetector and BarcodeDetector
"""

from .types import DecodedSymbol
from .backend import (
    DECODER_NAMES,
    DecoderAdapter,
    DecoderSpec,
    get_decoder_by_name,
    get_decoder_spec,
    validate_decoder_options,
)

__all__ = [
    "DecodedSymbol",
    "DECODER_NAMES",
    "DecoderAdapter",
    "DecoderSpec",
    "get_decoder_by_name",
    "get_decoder_spec",
    "validate_decoder_options",
]
