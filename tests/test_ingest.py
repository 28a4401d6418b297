from io import BytesIO
from pathlib import Path

import pytest
from PIL import Image

from image_labeler.ingest import InvalidImageError, photo_from_path, prepare_image, scan_photos


def test_scan_photos_reads_files(tmp_path: Path, make_image) -> None:
    make_image("a.jpg")
    make_image("b.png", color="blue")
    nested = tmp_path / "nested"
    nested.mkdir()
    Image.new("RGB", (4, 4), color="green").save(nested / "c.JPEG")
    (tmp_path / "ignore.txt").write_text("skip me")

    photos = scan_photos(tmp_path)
    names = sorted(Path(p.path).name for p in photos)
    assert names == ["a.jpg", "b.png", "c.JPEG"]
    for photo in photos:
        assert photo.id == photo.sha256
        assert len(photo.sha256) == 64
        assert photo.size_bytes > 0


def test_photo_from_path_is_content_addressed(tmp_path: Path, make_image) -> None:
    first = make_image("one.png", color="red")
    second = make_image("two.png", color="red")
    assert photo_from_path(first).id == photo_from_path(second).id
    assert photo_from_path(first).path == str(first.resolve())


def test_prepare_image_downsizes_and_reencodes(make_image) -> None:
    path = make_image("wide.png", size=(1000, 500))
    data = prepare_image(path, max_size=200)
    with Image.open(BytesIO(data)) as img:
        assert img.format == "JPEG"
        assert img.mode == "RGB"
        assert img.size == (200, 100)


def test_prepare_image_applies_exif_orientation() -> None:
    exif = Image.Exif()
    exif[274] = 6  # Orientation: rotate 90 CW
    buf = BytesIO()
    Image.new("RGB", (40, 20), color="white").save(buf, format="JPEG", exif=exif)
    data = prepare_image(buf.getvalue(), max_size=512)
    with Image.open(BytesIO(data)) as img:
        assert img.size == (20, 40)


def test_prepare_image_rejects_garbage(tmp_path: Path) -> None:
    with pytest.raises(InvalidImageError):
        prepare_image(b"\x00\x01not-an-image")
    with pytest.raises(InvalidImageError):
        prepare_image(tmp_path / "missing.jpg")
