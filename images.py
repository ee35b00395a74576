"""
Image input handling for the barcode reader.

Every accepted input form is turned into an ImageFrame: a numpy pixel array
plus the color space needed to interpret its channels. Anything that cannot
be turned into a frame with known dimensions raises InputError, which is
fatal for the read.

Accepted inputs:
- numpy.ndarray (2D grayscale, or 3D with 1, 3 or 4 channels)
- encoded image bytes (PNG, JPEG, ...) decoded with Pillow
- a path to an encoded image file
- a raw bitmap mapping {data, width, height, colorSpace?, channels?, dtype?}
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

import config
from errors import InputError

ImageSource = Union[np.ndarray, bytes, bytearray, str, Path, Mapping[str, Any]]


@dataclass(frozen=True)
class ImageFrame:
    """A loaded image ready for preprocessing.

    Attributes:
        pixels: uint8 array, (H, W) for GRAY or (H, W, C) otherwise.
        color_space: One of GRAY, RGB, BGR, RGBA, BGRA.
    """

    pixels: np.ndarray
    color_space: str

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def dimensions(self) -> tuple[int, int]:
        """(width, height) in pixels."""
        return self.width, self.height


def load_image(source: ImageSource, color_space: str | None = None) -> ImageFrame:
    """Load any supported input into an ImageFrame.

    Args:
        source: Image input (see module docstring for accepted forms).
        color_space: Optional color space for ndarray input. Ignored for
            other forms, which carry or imply their own.

    Returns:
        ImageFrame with resolved dimensions.

    Raises:
        InputError: If the input type is unsupported, the payload is
            malformed, or the dimensions cannot be determined.
    """
    if isinstance(source, ImageFrame):
        return source
    if isinstance(source, np.ndarray):
        return frame_from_array(source, color_space)
    if isinstance(source, (bytes, bytearray)):
        return frame_from_encoded(bytes(source))
    if isinstance(source, (str, Path)):
        return frame_from_path(Path(source))
    if isinstance(source, Mapping):
        return frame_from_bitmap(source)
    raise InputError(
        f"Invalid input: expected ndarray, bytes, path or raw bitmap, "
        f"got {type(source).__name__}"
    )


def frame_from_array(array: np.ndarray, color_space: str | None = None) -> ImageFrame:
    """Wrap a numpy array, inferring the color space from its channel count."""
    if array.ndim not in (2, 3) or array.size == 0:
        raise InputError(
            f"Could not determine image dimensions from array with shape {array.shape}"
        )
    if array.dtype != np.uint8:
        raise InputError(
            f"Unsupported dtype: {array.dtype}. Only 'uint8' is currently supported."
        )

    channels = 1 if array.ndim == 2 else array.shape[2]
    if color_space is None:
        color_space = config.DEFAULT_COLOR_SPACE_FOR_CHANNELS.get(channels)
        if color_space is None:
            raise InputError(f"Unsupported channel count: {channels}")
    else:
        color_space = color_space.upper()
        expected = config.COLOR_SPACE_CHANNELS.get(color_space)
        if expected is None:
            raise InputError(_unsupported_color_space(color_space))
        if expected != channels:
            raise InputError(
                f"Color space {color_space} expects {expected} channel(s), "
                f"array has {channels}"
            )

    if array.ndim == 3 and channels == 1:
        array = array[:, :, 0]
    return ImageFrame(pixels=array, color_space=color_space)


def frame_from_encoded(data: bytes) -> ImageFrame:
    """Decode an encoded image (PNG, JPEG, ...) with Pillow."""
    if not data:
        raise InputError("Failed to decode image buffer: buffer is empty")
    try:
        with Image.open(io.BytesIO(data)) as image:
            if image.mode in ("L", "1", "I;16", "I", "F"):
                converted = image.convert("L")
                color_space = "GRAY"
            else:
                converted = image.convert("RGB")
                color_space = "RGB"
            pixels = np.array(converted)
    except (UnidentifiedImageError, OSError) as e:
        raise InputError(f"Failed to decode image buffer: {e}") from e
    return frame_from_array(pixels, color_space)


def frame_from_path(path: Path) -> ImageFrame:
    """Read and decode an image file."""
    if not path.is_file():
        raise InputError(f"Image file not found: {path}")
    return frame_from_encoded(path.read_bytes())


def frame_from_bitmap(bitmap: Mapping[str, Any]) -> ImageFrame:
    """Build a frame from a raw bitmap mapping.

    The channel layout comes from ``colorSpace`` if present, else from a
    numeric ``channels`` field, else it is inferred from the data length.
    """
    for key in ("data", "width", "height"):
        if bitmap.get(key) is None:
            raise InputError(f"Invalid image object: missing required property '{key}'")

    data = bitmap["data"]
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise InputError("Invalid image object: property 'data' must be bytes")

    width, height = bitmap["width"], bitmap["height"]
    if not all(isinstance(v, int) and not isinstance(v, bool) for v in (width, height)):
        raise InputError("Invalid image object: 'width' and 'height' must be integers")
    if width <= 0 or height <= 0:
        raise InputError(
            f"Width and height must be positive numbers (width: {width}, height: {height})"
        )
    if width > config.MAX_IMAGE_DIMENSION or height > config.MAX_IMAGE_DIMENSION:
        raise InputError(
            f"Image dimensions too large (max: {config.MAX_IMAGE_DIMENSION})"
        )

    dtype = bitmap.get("dtype")
    if dtype is not None and dtype != "uint8":
        raise InputError(f"Unsupported dtype: {dtype}. Only 'uint8' is currently supported.")

    pixel_count = width * height
    color_space = bitmap.get("colorSpace")
    channels = bitmap.get("channels")

    if color_space is not None:
        color_space = str(color_space).upper()
        channels = config.COLOR_SPACE_CHANNELS.get(color_space)
        if channels is None:
            raise InputError(_unsupported_color_space(color_space))
    elif isinstance(channels, int) and not isinstance(channels, bool):
        color_space = config.DEFAULT_COLOR_SPACE_FOR_CHANNELS.get(channels)
        if color_space is None:
            raise InputError(f"Unsupported channel count: {channels}")
    else:
        if len(data) % pixel_count != 0:
            raise InputError(
                f"Cannot infer channels: data length ({len(data)}) is not divisible "
                f"by width*height ({pixel_count})"
            )
        channels = len(data) // pixel_count
        color_space = config.DEFAULT_COLOR_SPACE_FOR_CHANNELS.get(channels)
        if color_space is None:
            raise InputError(
                f"Cannot determine default colorSpace for {channels} channels"
            )

    expected_bytes = pixel_count * channels
    if expected_bytes > config.MAX_BUFFER_SIZE:
        raise InputError(
            f"Image data too large: {expected_bytes} bytes "
            f"(max: {config.MAX_BUFFER_SIZE} bytes)"
        )
    if len(data) != expected_bytes:
        raise InputError(
            f"Data length mismatch: expected {expected_bytes} bytes "
            f"({width}x{height}x{channels}), got {len(data)} bytes"
        )

    # Copy so the frame owns its pixels independently of the caller's buffer
    flat = np.frombuffer(bytes(data), dtype=np.uint8).copy()
    shape = (height, width) if channels == 1 else (height, width, channels)
    return ImageFrame(pixels=flat.reshape(shape), color_space=color_space)


def _unsupported_color_space(color_space: str) -> str:
    supported = ", ".join(config.COLOR_SPACE_CHANNELS)
    return f"Unsupported colorSpace: {color_space}. Supported values: {supported}"
