from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image


@pytest.fixture(autouse=True)
def isolate_model_env(monkeypatch):
    """Keep a developer's local model settings out of the tests."""
    for name in (
        "OLLAMA_BASE_URL",
        "OLLAMA_VISION_MODEL",
        "OLLAMA_HTTP_TIMEOUT",
        "LABELER_MAX_CANDIDATES",
        "LABELER_TOP_N",
        "LABELER_IMAGE_MAX_SIZE",
        "LIVE_MIN_INTERVAL",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def make_image(tmp_path: Path):
    def _make(name: str = "photo.jpg", size: tuple[int, int] = (16, 16), color: str = "red") -> Path:
        path = tmp_path / name
        Image.new("RGB", size, color=color).save(path)
        return path

    return _make
