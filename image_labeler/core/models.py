from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PhotoFile(BaseModel):
    id: str
    path: str
    sha256: str
    size_bytes: int
    mtime: datetime


class ClassificationCandidate(BaseModel):
    """One label emitted by the classifier for a single inference."""

    model_config = ConfigDict(frozen=True)

    label: str
    confidence: float


class RankedResult(BaseModel):
    """Display-ready label with an integer percentage."""

    model_config = ConfigDict(frozen=True)

    label: str
    percentage: int

    def __str__(self) -> str:
        return f"{self.label} ({self.percentage}%)"


class ClassificationErrorKind(str, Enum):
    MODEL_UNAVAILABLE = "model_unavailable"
    INVALID_IMAGE = "invalid_image"
    INFERENCE_FAILED = "inference_failed"
    NO_RESULTS = "no_results"


class ClassificationError(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: ClassificationErrorKind
    message: str


class ClassificationOutcome(BaseModel):
    """Single completion value of one classification: results or a typed error."""

    model_config = ConfigDict(frozen=True)

    photo_id: Optional[str] = None
    results: list[RankedResult] = Field(default_factory=list)
    error: Optional[ClassificationError] = None
    model: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def total(self) -> int:
        return sum(result.percentage for result in self.results)

    def top(self, limit: int | None = 3) -> list[RankedResult]:
        from image_labeler.vision.normalizer import rank_for_display

        return rank_for_display(self.results, limit=limit)

    @classmethod
    def failure(
        cls,
        kind: ClassificationErrorKind,
        message: str,
        *,
        photo_id: str | None = None,
        model: str | None = None,
    ) -> "ClassificationOutcome":
        return cls(
            photo_id=photo_id,
            error=ClassificationError(kind=kind, message=message),
            model=model,
        )
