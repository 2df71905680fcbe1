from __future__ import annotations

from typing import List

from ...domain.interfaces import AnalyticsBackend
from ...infrastructure.logging import get_logger
from .. import classifier
from ..dto import BestTimeView, PredictionView, ScoredRow
from ..validators import parse_positive_int, require_text

logger = get_logger("insight_dashboard.ml")


class MLInsightsUseCase:
    """Use-case: fetch ML outputs and turn scores into display values."""

    def __init__(self, backend: AnalyticsBackend) -> None:
        self._backend = backend

    def recommendations(self, user_id: str, max_items: object = 5) -> List[ScoredRow]:
        uid = require_text(user_id, "User")
        count = parse_positive_int(max_items, "Count")
        logger.info("Recommendations request | user=%s | max=%d", uid, count)
        items = self._backend.recommendations(uid, count)
        return [ScoredRow(item_id=i, score_text=s) for i, s in classifier.ranked_scores(items)]

    def popular_items(self, max_items: object = 5) -> List[ScoredRow]:
        count = parse_positive_int(max_items, "Count")
        logger.info("Popular items request | max=%d", count)
        items = self._backend.popular_items(count)
        return [ScoredRow(item_id=i, score_text=s) for i, s in classifier.ranked_scores(items)]

    def prediction(self, user_id: str, event_name: str) -> PredictionView:
        uid = require_text(user_id, "User")
        name = require_text(event_name, "Event name")
        result = self._backend.prediction(uid, name)
        return PredictionView(
            user_id=uid,
            event_name=name,
            percentage_text=classifier.format_percentage(result.likelihood),
            band=classifier.classify_prediction(result.likelihood),
        )

    def best_time(self, user_id: str) -> BestTimeView:
        uid = require_text(user_id, "User")
        result = self._backend.best_time(uid)
        text = classifier.format_hour(result.best_hour)
        return BestTimeView(user_id=uid, text=text, determinable=text != classifier.UNDETERMINABLE)
