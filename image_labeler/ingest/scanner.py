from __future__ import annotations

import hashlib
from datetime import datetime, timezone
from pathlib import Path

from image_labeler.core.models import PhotoFile

SUPPORTED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}


def _hash_file(path: Path, chunk_size: int = 1024 * 1024) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as infile:
        for chunk in iter(lambda: infile.read(chunk_size), b""):
            digest.update(chunk)
    return digest.hexdigest()


def photo_from_path(path: str | Path) -> PhotoFile:
    """Build a PhotoFile for a single image, keyed by the sha256 of its content."""
    photo_path = Path(path)
    stat = photo_path.stat()
    sha256 = _hash_file(photo_path)
    return PhotoFile(
        id=sha256,
        path=str(photo_path.resolve()),
        sha256=sha256,
        size_bytes=stat.st_size,
        mtime=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
    )


def scan_photos(root: str | Path) -> list[PhotoFile]:
    """Scan a directory tree for photo files and return PhotoFile models."""
    root_path = Path(root)
    files: list[PhotoFile] = []
    for path in sorted(root_path.rglob("*")):
        if not path.is_file():
            continue
        if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
            continue
        files.append(photo_from_path(path))
    return files
