from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Union

from PIL import Image, ImageOps, UnidentifiedImageError

ImageSource = Union[bytes, str, Path]


class InvalidImageError(ValueError):
    """Raised when image data cannot be decoded."""


def prepare_image(source: ImageSource, max_size: int = 512) -> bytes:
    """
    Decode an image, apply its EXIF orientation, and re-encode it as an RGB JPEG
    no larger than `max_size` on either side.
    """
    opened = BytesIO(source) if isinstance(source, bytes) else Path(source)
    try:
        with Image.open(opened) as img:
            img = ImageOps.exif_transpose(img)
            img = img.convert("RGB")
            img.thumbnail((max_size, max_size))
            buf = BytesIO()
            img.save(buf, format="JPEG", quality=90)
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as exc:
        raise InvalidImageError(f"Cannot decode image: {exc}") from exc
    return buf.getvalue()
