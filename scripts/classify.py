#!/usr/bin/env python
"""
Classify one or more photos with the configured vision model.

Usage:
  OLLAMA_VISION_MODEL=llava python scripts/classify.py photo.jpg
  python scripts/classify.py ~/Pictures --top 5
"""
from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

# Ensure the repo root is on the import path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from image_labeler.core.env import LabelerConfig, configure_logging, load_dotenv_if_present
from image_labeler.core.models import PhotoFile
from image_labeler.ingest import photo_from_path, scan_photos
from image_labeler.vision import classify_photo, format_results
from image_labeler.vision.model_client import ModelLoadError, build_backend


def _collect(targets: list[Path]) -> list[PhotoFile]:
    photos: list[PhotoFile] = []
    for target in targets:
        if target.is_dir():
            photos.extend(scan_photos(target))
        elif target.is_file():
            photos.append(photo_from_path(target))
        else:
            raise FileNotFoundError(f"Not a file or directory: {target}")
    return photos


async def _run(
    photos: list[PhotoFile], config: LabelerConfig, limit: int, show_all: bool
) -> int:
    try:
        backend = build_backend(config)
    except ModelLoadError as exc:
        print(f"Failed to load classification model: {exc}", file=sys.stderr)
        return 2

    failures = 0
    for photo in photos:
        outcome = await classify_photo(photo, backend, max_size=config.image_max_size)
        print(photo.path)
        if outcome.ok:
            shown = outcome.results if show_all else outcome.top(limit)
            print(format_results(shown))
        else:
            failures += 1
            print(f"Error: {outcome.error.message}")
        print()
    return 1 if failures else 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Classify photos and print ranked labels.")
    parser.add_argument("targets", nargs="+", type=Path, help="Image files or directories")
    parser.add_argument("--top", type=int, default=None, help="Labels to show per photo")
    parser.add_argument("--all", action="store_true", help="Show every label, including 0%%")
    args = parser.parse_args()

    load_dotenv_if_present()
    configure_logging()
    config = LabelerConfig.from_env()

    photos = _collect(args.targets)
    if not photos:
        print("No supported photos found")
        return

    limit = args.top or config.top_n
    sys.exit(asyncio.run(_run(photos, config, limit, args.all)))


if __name__ == "__main__":
    main()
