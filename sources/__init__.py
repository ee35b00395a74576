"""
Image source adapters.

Resolves command-line paths (single files or directories) to the image
files to read.
"""

from .local import IMAGE_EXTENSIONS, scan_local_images

__all__ = [
    "IMAGE_EXTENSIONS",
    "scan_local_images",
]
