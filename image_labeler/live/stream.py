from __future__ import annotations

import logging
import time
from typing import AsyncIterable, AsyncIterator, Callable, Iterable, Optional, Union

from image_labeler.core.env import LabelerConfig
from image_labeler.core.models import ClassificationOutcome
from image_labeler.vision.classifier import classify_image
from image_labeler.vision.model_client import ClassifierBackend

logger = logging.getLogger(__name__)

FrameSource = Union[Iterable[bytes], AsyncIterable[bytes]]


class FrameThrottle:
    """Accept a frame only when more than `min_interval` seconds passed since the last one."""

    def __init__(self, min_interval: float = 0.5, clock: Callable[[], float] = time.monotonic):
        self.min_interval = min_interval
        self.clock = clock
        self._last: Optional[float] = None

    def ready(self) -> bool:
        now = self.clock()
        if self._last is not None and now - self._last <= self.min_interval:
            return False
        self._last = now
        return True


async def _iterate(frames: FrameSource) -> AsyncIterator[bytes]:
    if hasattr(frames, "__aiter__"):
        async for frame in frames:
            yield frame
    else:
        for frame in frames:
            yield frame


async def classify_frames(
    frames: FrameSource,
    backend: Optional[ClassifierBackend],
    *,
    throttle: FrameThrottle | None = None,
    max_size: int = 512,
) -> AsyncIterator[ClassificationOutcome]:
    """Classify a stream of encoded frames, skipping frames that arrive too quickly."""
    throttle = throttle or FrameThrottle(LabelerConfig.from_env().live_min_interval)
    index = -1
    async for frame in _iterate(frames):
        index += 1
        if not throttle.ready():
            continue
        outcome = await classify_image(frame, backend, max_size=max_size)
        if not outcome.ok:
            logger.warning("Live frame %d not classified: %s", index, outcome.error.message)
        yield outcome
