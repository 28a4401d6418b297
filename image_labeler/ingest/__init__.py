"""Photo discovery and image preparation for classification."""

from .loader import InvalidImageError, prepare_image
from .scanner import SUPPORTED_EXTENSIONS, photo_from_path, scan_photos

__all__ = [
    "SUPPORTED_EXTENSIONS",
    "InvalidImageError",
    "photo_from_path",
    "prepare_image",
    "scan_photos",
]
