"""
Local directory image scanning.

Functions for finding image files in local directories.
"""

from pathlib import Path

from errors import InputError

# Formats Pillow can decode for the reader
IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp", ".bmp", ".tiff", ".tif", ".gif"}


def scan_local_images(path: str | Path) -> list[Path]:
    """Find all image files in a directory or return a single image file.

    Directories are not searched recursively.

    Returns:
        Sorted list of image file paths. Empty for a directory without images.

    Raises:
        InputError: If path doesn't exist or isn't a supported image/directory.
    """
    file_path = Path(path).resolve()

    if file_path.is_file():
        if file_path.suffix.lower() in IMAGE_EXTENSIONS:
            return [file_path]
        raise InputError(f"{path} is not a supported image file")

    if not file_path.is_dir():
        raise InputError(f"{path} is not a valid file or directory")

    return sorted(
        p for p in file_path.iterdir()
        if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS
    )
