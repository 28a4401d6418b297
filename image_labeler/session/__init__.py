"""Explicit classification state and its update cycle."""

from .controller import LabelerSession
from .state import (
    ClassificationFinished,
    ClassificationStarted,
    Cleared,
    LabelerState,
    Notice,
    PhotoSelected,
    Status,
    update,
)

__all__ = [
    "ClassificationFinished",
    "ClassificationStarted",
    "Cleared",
    "LabelerSession",
    "LabelerState",
    "Notice",
    "PhotoSelected",
    "Status",
    "update",
]
