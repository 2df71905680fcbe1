from __future__ import annotations

from typing import List

from ...domain.errors import ValidationError
from ...domain.interfaces import AnalyticsBackend
from ...domain.models import CohortResult, TimePeriod
from ...infrastructure.logging import get_logger
from .. import classifier
from ..dto import CohortCell, CohortMatrix, CohortRequest, CohortRow, RFMRequest, RFMRow
from ..validators import parse_positive_int, require_text

logger = get_logger("insight_dashboard.segmentation")

NOT_APPLICABLE = "-"


def parse_time_period(value: object) -> TimePeriod:
    try:
        return TimePeriod(str(value).strip().upper())
    except ValueError:
        allowed = ", ".join(p.value for p in TimePeriod)
        raise ValidationError(f"Unknown time period '{value}' (expected one of {allowed})") from None


def cohort_matrix(result: CohortResult) -> CohortMatrix:
    """Classify the retention triangle; cells a cohort has not reached are N/A."""
    rows: List[CohortRow] = []
    for i in range(result.num_periods):
        cells: List[CohortCell] = []
        for j in range(result.num_periods):
            if not classifier.is_cohort_cell_applicable(i, j, result.num_periods):
                cells.append(CohortCell(text=NOT_APPLICABLE, band=None, applicable=False))
                continue
            p = result.retention(i, j)
            cells.append(CohortCell(text=classifier.format_percentage(p), band=classifier.classify_retention(p), applicable=True))
        rows.append(CohortRow(cohort_index=i, size=result.cohort_sizes.get(i, 0), cells=cells))
    return CohortMatrix(num_periods=result.num_periods, rows=rows)


class SegmentationUseCase:
    """Use-case: run RFM and cohort analyses and classify their scores."""

    def __init__(self, backend: AnalyticsBackend) -> None:
        self._backend = backend

    def rfm(self, req: RFMRequest) -> List[RFMRow]:
        recency_days = parse_positive_int(req.recency_days, "Recency days")
        num_segments = parse_positive_int(req.num_segments, "Number of segments")
        logger.info("RFM request | recency_days=%d | segments=%d", recency_days, num_segments)
        scores = self._backend.rfm_segmentation(recency_days, num_segments)
        return [
            RFMRow(
                user_id=user_id,
                recency=score.recency,
                frequency=score.frequency,
                monetary=score.monetary,
                label=classifier.rfm_label(score),
                band=classifier.classify_rfm(score),
            )
            for user_id, score in scores.items()
        ]

    def cohorts(self, req: CohortRequest) -> CohortMatrix:
        period = parse_time_period(req.time_period)
        num_periods = parse_positive_int(req.num_periods, "Number of periods")
        event_name = require_text(req.target_event_name, "Target event name")
        logger.info("Cohort request | period=%s | periods=%d | event=%s", period.value, num_periods, event_name)
        return cohort_matrix(self._backend.cohort_analysis(period, num_periods, event_name))
