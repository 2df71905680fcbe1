from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..domain.models import Band, TimePeriod


@dataclass(frozen=True)
class RFMRequest:
    recency_days: int = 30
    num_segments: int = 5


@dataclass(frozen=True)
class CohortRequest:
    time_period: TimePeriod = TimePeriod.WEEK
    num_periods: int = 4
    target_event_name: str = "login"


@dataclass(frozen=True)
class CreateUserRequest:
    user_id: str
    name: str
    email: str
    country: Optional[str] = None
    age: Optional[str] = None


@dataclass(frozen=True)
class CreateEventRequest:
    event_name: str
    user_id: str
    properties: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RFMRow:
    user_id: str
    recency: int
    frequency: int
    monetary: int
    label: str
    band: Band


@dataclass(frozen=True)
class CohortCell:
    """One retention cell; ``band`` is None for not-applicable cells."""
    text: str
    band: Optional[Band]
    applicable: bool


@dataclass(frozen=True)
class CohortRow:
    cohort_index: int
    size: int
    cells: List[CohortCell]


@dataclass(frozen=True)
class CohortMatrix:
    num_periods: int
    rows: List[CohortRow]


@dataclass(frozen=True)
class ScoredRow:
    item_id: str
    score_text: str


@dataclass(frozen=True)
class PredictionView:
    user_id: str
    event_name: str
    percentage_text: str
    band: Band


@dataclass(frozen=True)
class BestTimeView:
    user_id: str
    text: str
    determinable: bool


@dataclass(frozen=True)
class DistributionRow:
    """Event label shown next to the (global) aggregate value."""
    label: Any
    value: Any
