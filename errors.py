"""
Exception hierarchy for the barcode reader.

Two families with different handling:

- Fatal for the image being read: ConfigurationError, InputError.
  These abort the read (and a whole batch) and reach the caller.
- Recoverable inside a block: PreprocessingError, DecoderError.
  The executor logs them as warnings and the block contributes nothing.
"""


class BarcodeReaderError(Exception):
    """Base exception for all barcode reader errors."""


# -----------------------------------------------------------------------------
# Fatal
# -----------------------------------------------------------------------------


class ConfigurationError(BarcodeReaderError, ValueError):
    """Raised for an invalid block list, mode, or block definition."""


class InputError(BarcodeReaderError, ValueError):
    """Raised when an image cannot be loaded or its dimensions resolved."""


# -----------------------------------------------------------------------------
# Block-local
# -----------------------------------------------------------------------------


class BlockError(BarcodeReaderError):
    """Base for failures confined to a single block."""


class PreprocessingError(BlockError):
    """Raised when a preprocessing step cannot handle its input."""


class DecoderError(BlockError):
    """Raised when a decoder backend fails or is unavailable."""
