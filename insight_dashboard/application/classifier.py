"""
Result Classifier.

Pure functions mapping backend scores to operator-facing bands and display
strings. They never raise on noisy input: out-of-range values land in the
nearest band or format.
"""
from __future__ import annotations

import math
from typing import Iterable, List

from ..domain.models import Band, RFMScore, RecommendationItem

HIGH_THRESHOLD = 70.0
MEDIUM_THRESHOLD = 30.0
UNDETERMINABLE = "undeterminable"


def classify_rfm(score: RFMScore) -> Band:
    """HIGH when all axes are >= 4; LOW for lapsed (recency <= 2) high-value users.

    There is no all-low bucket: anything else is MEDIUM, including 1-1-1.
    """
    if score.recency >= 4 and score.frequency >= 4 and score.monetary >= 4:
        return Band.HIGH
    if score.recency <= 2 and score.frequency >= 4 and score.monetary >= 4:
        return Band.LOW
    return Band.MEDIUM


def rfm_label(score: RFMScore) -> str:
    return f"{score.recency}-{score.frequency}-{score.monetary}"


def band_percentage(percentage: float) -> Band:
    if percentage is None or math.isnan(percentage):
        return Band.LOW
    # fraction * 100 can land a hair under a threshold (0.7 -> 69.99999...)
    percentage = round(percentage, 9)
    if percentage >= HIGH_THRESHOLD:
        return Band.HIGH
    if percentage >= MEDIUM_THRESHOLD:
        return Band.MEDIUM
    return Band.LOW


def classify_retention(fraction: float) -> Band:
    return band_percentage(_as_float(fraction) * 100)


def classify_prediction(likelihood: float) -> Band:
    return band_percentage(_as_float(likelihood) * 100)


def is_cohort_cell_applicable(cohort_index: int, period_offset: int, num_periods: int) -> bool:
    """A cohort only has data for offsets it has lived through."""
    return period_offset < num_periods - cohort_index


def format_percentage(fraction: float) -> str:
    """Fraction in [0, 1] as a percentage with one decimal, e.g. ``"42.5%"``."""
    pct = min(100.0, max(0.0, _as_float(fraction) * 100))
    return f"{pct:.1f}%"


def format_hour(hour: int) -> str:
    """Hour of day in 12-hour form; -1 (or anything below) is undeterminable."""
    h = int(hour)
    if h < 0:
        return UNDETERMINABLE
    h = min(h, 23)
    if h == 0:
        return "12 AM"
    if h < 12:
        return f"{h} AM"
    if h == 12:
        return "12 PM"
    return f"{h - 12} PM"


def format_score(score: float) -> str:
    return f"{_as_float(score):.2f}"


def ranked_scores(items: Iterable[RecommendationItem]) -> List[tuple[str, str]]:
    """(item_id, score text) in backend rank order; no re-sorting or dedup."""
    return [(it.item_id, format_score(it.score)) for it in items]


def _as_float(value: float) -> float:
    try:
        f = float(value)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(f) else f
