from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from image_labeler.core.models import (
    ClassificationError,
    ClassificationErrorKind,
    ClassificationOutcome,
    PhotoFile,
    RankedResult,
)


class Status(str, Enum):
    IDLE = "idle"
    CLASSIFYING = "classifying"
    DONE = "done"
    FAILED = "failed"


class Notice(str, Enum):
    """User-facing feedback emitted when a classification settles."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class LabelerState(BaseModel):
    model_config = ConfigDict(frozen=True)

    photo: Optional[PhotoFile] = None
    status: Status = Status.IDLE
    results: list[RankedResult] = Field(default_factory=list)
    error: Optional[ClassificationError] = None
    notice: Optional[Notice] = None


class PhotoSelected(BaseModel):
    model_config = ConfigDict(frozen=True)

    photo: PhotoFile


class ClassificationStarted(BaseModel):
    model_config = ConfigDict(frozen=True)


class ClassificationFinished(BaseModel):
    model_config = ConfigDict(frozen=True)

    outcome: ClassificationOutcome


class Cleared(BaseModel):
    model_config = ConfigDict(frozen=True)


Message = Union[PhotoSelected, ClassificationStarted, ClassificationFinished, Cleared]


def _finish(state: LabelerState, outcome: ClassificationOutcome) -> LabelerState:
    current_id = state.photo.id if state.photo else None
    if outcome.photo_id is not None and outcome.photo_id != current_id:
        return state  # stale outcome for a photo that is no longer selected
    if outcome.ok:
        return state.model_copy(
            update={
                "status": Status.DONE,
                "results": list(outcome.results),
                "error": None,
                "notice": Notice.SUCCESS,
            }
        )
    notice = (
        Notice.WARNING
        if outcome.error.kind == ClassificationErrorKind.NO_RESULTS
        else Notice.ERROR
    )
    return state.model_copy(
        update={
            "status": Status.FAILED,
            "results": [],
            "error": outcome.error,
            "notice": notice,
        }
    )


def update(state: LabelerState, message: Message) -> LabelerState:
    """Apply one message to the state and return the next state."""
    if isinstance(message, PhotoSelected):
        return LabelerState(photo=message.photo)
    if isinstance(message, ClassificationStarted):
        return state.model_copy(
            update={
                "status": Status.CLASSIFYING,
                "results": [],
                "error": None,
                "notice": None,
            }
        )
    if isinstance(message, ClassificationFinished):
        return _finish(state, message.outcome)
    if isinstance(message, Cleared):
        return LabelerState()
    raise TypeError(f"Unknown message: {message!r}")
