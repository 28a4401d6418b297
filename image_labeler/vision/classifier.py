from __future__ import annotations

import asyncio
import logging
from typing import Optional

from image_labeler.core.models import (
    ClassificationErrorKind,
    ClassificationOutcome,
    PhotoFile,
)
from image_labeler.ingest.loader import ImageSource, InvalidImageError, prepare_image
from image_labeler.vision.model_client import (
    ClassifierBackend,
    InferenceError,
    ModelLoadError,
)
from image_labeler.vision.normalizer import normalize_percentages

logger = logging.getLogger(__name__)


async def classify_image(
    image: ImageSource,
    backend: Optional[ClassifierBackend],
    *,
    photo_id: str | None = None,
    max_size: int = 512,
) -> ClassificationOutcome:
    """
    Classify one image and return its outcome.

    Expected failures never raise; they come back as a typed error:
    - undecodable image → invalid_image
    - no backend or model load failure → model_unavailable
    - transport/parse/runtime failure → inference_failed
    - empty label list → no_results
    """
    if backend is None:
        return ClassificationOutcome.failure(
            ClassificationErrorKind.MODEL_UNAVAILABLE,
            "Failed to load classification model",
            photo_id=photo_id,
        )
    model_name = getattr(backend, "name", None)

    try:
        prepared = await asyncio.to_thread(prepare_image, image, max_size)
    except InvalidImageError as exc:
        logger.warning("Image rejected for %s: %s", photo_id or "upload", exc)
        return ClassificationOutcome.failure(
            ClassificationErrorKind.INVALID_IMAGE, str(exc), photo_id=photo_id, model=model_name
        )

    try:
        candidates = await asyncio.to_thread(backend.classify, prepared)
    except ModelLoadError as exc:
        logger.warning("Vision model unavailable (%s): %s", model_name, exc)
        return ClassificationOutcome.failure(
            ClassificationErrorKind.MODEL_UNAVAILABLE, str(exc), photo_id=photo_id, model=model_name
        )
    except InferenceError as exc:
        logger.warning("Vision classifier failed for %s: %s", photo_id or "upload", exc)
        return ClassificationOutcome.failure(
            ClassificationErrorKind.INFERENCE_FAILED, str(exc), photo_id=photo_id, model=model_name
        )
    except Exception as exc:
        logger.error("Vision classifier runtime error for %s: %s", photo_id or "upload", exc)
        return ClassificationOutcome.failure(
            ClassificationErrorKind.INFERENCE_FAILED,
            f"Classification error: {exc}",
            photo_id=photo_id,
            model=model_name,
        )

    if not candidates:
        return ClassificationOutcome.failure(
            ClassificationErrorKind.NO_RESULTS, "No results found", photo_id=photo_id, model=model_name
        )

    results = normalize_percentages(candidates)
    logger.debug(
        "Classified %s into %d labels (total %d%%)",
        photo_id or "upload",
        len(results),
        sum(result.percentage for result in results),
    )
    return ClassificationOutcome(photo_id=photo_id, results=results, model=model_name)


async def classify_photo(
    photo: PhotoFile, backend: Optional[ClassifierBackend], *, max_size: int = 512
) -> ClassificationOutcome:
    return await classify_image(photo.path, backend, photo_id=photo.id, max_size=max_size)
