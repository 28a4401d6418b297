"""Classifier backends, the async classification call, and confidence normalization."""

from .classifier import classify_image, classify_photo
from .normalizer import format_results, normalize_percentages, parse_result_line, rank_for_display

__all__ = [
    "classify_image",
    "classify_photo",
    "format_results",
    "normalize_percentages",
    "parse_result_line",
    "rank_for_display",
]
