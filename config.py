"""Central configuration for barcode reading.

All tunable parameters are defined here with descriptive names.
These values can be adjusted to trade recall against speed.
"""

# =============================================================================
# EXECUTION
# =============================================================================

# How blocks are scheduled when no mode is given:
# "parallel" runs every block and merges, "sequential" stops at the first hit
DEFAULT_EXECUTION_MODE = "parallel"

EXECUTION_MODES = ("parallel", "sequential")

# Upper bound on worker threads for parallel mode (None = one per block)
MAX_PARALLEL_WORKERS = None

# Block list used when neither a config file nor --block is supplied.
# Each entry is (decoder, preprocessing, options).
DEFAULT_BLOCKS = (
    ("zxing", "original", {}),
    ("zbar", "original", {}),
    ("zxing", "histogram", {"try_harder": True}),
    ("zbar", "otsu", {}),
)

# =============================================================================
# IMAGE INPUT
# =============================================================================

# Largest accepted width or height for raw bitmap input
MAX_IMAGE_DIMENSION = 32768

# Largest accepted raw bitmap payload in bytes (500 MB)
MAX_BUFFER_SIZE = 500 * 1024 * 1024

# Color spaces accepted for raw bitmaps, with their channel counts
COLOR_SPACE_CHANNELS = {
    "GRAY": 1,
    "RGB": 3,
    "BGR": 3,
    "RGBA": 4,
    "BGRA": 4,
}

# Color space assumed when only a channel count is known
DEFAULT_COLOR_SPACE_FOR_CHANNELS = {
    1: "GRAY",
    3: "RGB",
    4: "RGBA",
}

# =============================================================================
# DECODERS
# =============================================================================

# ZXing: search rotated and downscaled variants (slower, higher recall)
ZXING_TRY_HARDER = False

# ZBar: symbologies to enable (None = library default, all symbologies)
ZBAR_SYMBOLS = None

# OpenCV: which detectors to run, in order
OPENCV_READERS = ("qrcode", "barcode")

# =============================================================================
# PREPROCESSING
# =============================================================================

# Otsu binarization output levels
OTSU_MAX_VALUE = 255
