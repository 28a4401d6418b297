from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence, Tuple, Union

from image_labeler.core.models import ClassificationCandidate, RankedResult

CandidateLike = Union[ClassificationCandidate, Tuple[str, float]]


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _unpack(candidate: CandidateLike) -> tuple[str, float]:
    if isinstance(candidate, ClassificationCandidate):
        return candidate.label, candidate.confidence
    label, confidence = candidate
    return str(label), float(confidence)


def normalize_percentages(candidates: Iterable[CandidateLike]) -> list[RankedResult]:
    """
    Convert classifier confidences into integer percentages that sum to 100.

    Each confidence is rounded to the nearest percent (halves away from zero).
    Any shortfall or excess is folded into the largest percentage, the first
    one in input order when several tie. Input order is preserved.
    """
    pairs = [_unpack(candidate) for candidate in candidates]
    if not pairs:
        return []

    percentages = [_round_half_away(confidence * 100) for _, confidence in pairs]
    diff = 100 - sum(percentages)
    if diff:
        max_index = max(range(len(percentages)), key=percentages.__getitem__)
        percentages[max_index] += diff

    return [
        RankedResult(label=label, percentage=percentage)
        for (label, _), percentage in zip(pairs, percentages)
    ]


def rank_for_display(
    results: Iterable[RankedResult], limit: Optional[int] = 3
) -> list[RankedResult]:
    """Drop zero entries, sort by descending percentage, keep the top `limit`."""
    visible = [result for result in results if result.percentage > 0]
    visible.sort(key=lambda result: result.percentage, reverse=True)
    if limit is None:
        return visible
    return visible[: max(limit, 0)]


def format_results(results: Sequence[RankedResult]) -> str:
    return "\n".join(str(result) for result in results)


def parse_result_line(line: str) -> Optional[RankedResult]:
    """Parse a `label (N%)` line back into a RankedResult; None if malformed."""
    text = line.strip()
    if " (" not in text or not text.endswith("%)"):
        return None
    label, _, rest = text.rpartition(" (")
    label = label.strip()
    try:
        percentage = int(rest[: -len("%)")])
    except ValueError:
        return None
    if not label:
        return None
    return RankedResult(label=label, percentage=percentage)
