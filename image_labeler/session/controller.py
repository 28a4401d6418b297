from __future__ import annotations

import logging
from typing import Callable, List, Optional

from image_labeler.core.models import ClassificationOutcome, PhotoFile
from image_labeler.vision.classifier import classify_photo
from image_labeler.vision.model_client import ClassifierBackend

from .state import (
    ClassificationFinished,
    ClassificationStarted,
    LabelerState,
    Message,
    PhotoSelected,
    update,
)

logger = logging.getLogger(__name__)

Listener = Callable[[LabelerState], None]


class LabelerSession:
    """Holds the current LabelerState and advances it one message at a time."""

    def __init__(
        self,
        backend: Optional[ClassifierBackend],
        *,
        max_size: int = 512,
        state: LabelerState | None = None,
    ):
        self.backend = backend
        self.max_size = max_size
        self.state = state or LabelerState()
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def dispatch(self, message: Message) -> LabelerState:
        self.state = update(self.state, message)
        logger.debug("Session %s -> %s", type(message).__name__, self.state.status.value)
        for listener in list(self._listeners):
            listener(self.state)
        return self.state

    async def classify(self, photo: PhotoFile) -> ClassificationOutcome:
        """Select `photo`, classify it, and settle the state with the outcome."""
        self.dispatch(PhotoSelected(photo=photo))
        self.dispatch(ClassificationStarted())
        outcome = await classify_photo(photo, self.backend, max_size=self.max_size)
        self.dispatch(ClassificationFinished(outcome=outcome))
        return outcome
