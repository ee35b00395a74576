"""
Grayscale enhancement functions for preprocessing.

All functions are pure: they take an input and return a new output without
mutating the original array. Decoders receive the result read-only, so
every block works on its own copy of the source pixels.
"""

import cv2
import numpy as np

import config
from errors import PreprocessingError

# OpenCV conversion codes from each supported color space to grayscale
_GRAY_CONVERSIONS = {
    "RGB": cv2.COLOR_RGB2GRAY,
    "BGR": cv2.COLOR_BGR2GRAY,
    "RGBA": cv2.COLOR_RGBA2GRAY,
    "BGRA": cv2.COLOR_BGRA2GRAY,
}


def _validate_image(img: np.ndarray) -> None:
    if not isinstance(img, np.ndarray):
        raise TypeError(f"Expected numpy.ndarray, got {type(img).__name__}")

    if img.ndim < 2 or img.ndim > 3:
        raise PreprocessingError(
            f"Image must be 2D or 3D array, got {img.ndim}D array with shape {img.shape}"
        )

    if img.size == 0:
        raise PreprocessingError("Image array is empty")


def to_grayscale(img: np.ndarray, color_space: str = "RGB") -> np.ndarray:
    """Convert an image to a single-channel uint8 grayscale array.

    Pure function: returns a new array without modifying the input.

    Args:
        img: Input image, 2D (already grayscale) or 3D with 1, 3 or 4 channels.
        color_space: Channel layout of ``img`` (GRAY, RGB, BGR, RGBA, BGRA).
            Ignored for 2D input.

    Returns:
        Grayscale image as 2D uint8 array with the same height and width.

    Raises:
        PreprocessingError: If the channel layout is unsupported.
        TypeError: If img is not a numpy array.

    Examples:
        >>> bgr = np.zeros((100, 200, 3), dtype=np.uint8)
        >>> to_grayscale(bgr, "BGR").shape
        (100, 200)
    """
    _validate_image(img)

    if img.ndim == 2:
        result = img.copy()
    elif img.shape[2] == 1:
        result = img[:, :, 0].copy()
    else:
        channels = img.shape[2]
        code = _GRAY_CONVERSIONS.get(color_space.upper())
        expected = config.COLOR_SPACE_CHANNELS.get(color_space.upper())
        if code is None or expected != channels:
            raise PreprocessingError(
                f"Unsupported channel layout: {channels} channel(s) as {color_space!r}. "
                "Expected 1 (GRAY), 3 (RGB/BGR), or 4 (RGBA/BGRA)."
            )
        result = cv2.cvtColor(img, code)

    if result.dtype != np.uint8:
        result = np.clip(result, 0, 255).astype(np.uint8)

    return result


def equalize_histogram(gray: np.ndarray) -> np.ndarray:
    """Spread grayscale intensities over the full 0-255 range.

    Raises:
        PreprocessingError: If ``gray`` is not a 2D array.
    """
    _require_grayscale(gray, "equalize_histogram")
    return cv2.equalizeHist(gray)


def otsu_threshold(gray: np.ndarray, max_value: int = config.OTSU_MAX_VALUE) -> np.ndarray:
    """Binarize a grayscale image with an automatically chosen Otsu threshold.

    Returns:
        Binary image with values 0 and ``max_value``.
    """
    _require_grayscale(gray, "otsu_threshold")
    _, binary = cv2.threshold(
        gray, 0, max_value, cv2.THRESH_BINARY | cv2.THRESH_OTSU
    )
    return binary


def _require_grayscale(img: np.ndarray, operation: str) -> None:
    _validate_image(img)
    if img.ndim != 2:
        raise PreprocessingError(
            f"{operation} requires grayscale input (2D array), "
            f"got {img.ndim}D array with shape {img.shape}"
        )
