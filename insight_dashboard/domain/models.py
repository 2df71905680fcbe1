from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Band(str, Enum):
    """Operator-facing category for a classified score."""
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


class AggregateType(str, Enum):
    COUNT = "COUNT"
    SUM = "SUM"
    AVG = "AVG"
    MIN = "MIN"
    MAX = "MAX"


class FilterOperator(str, Enum):
    """Operator names understood by the backend's query endpoint."""
    EQ = "EQ"
    NE = "NE"
    GT = "GT"
    GTE = "GTE"
    LT = "LT"
    LTE = "LTE"
    CONTAINS = "CONTAINS"
    STARTS_WITH = "STARTS_WITH"
    ENDS_WITH = "ENDS_WITH"
    IN = "IN"


class TimePeriod(str, Enum):
    DAY = "DAY"
    WEEK = "WEEK"
    MONTH = "MONTH"
    QUARTER = "QUARTER"
    YEAR = "YEAR"


@dataclass(frozen=True)
class FilterClause:
    """A single `where` predicate, passed through to the backend unmodified.

    Fields:
        field: Opaque field name from the backend schema.
        operator: Operator name (see FilterOperator); not validated here.
        value: Comparison value (scalar or list for IN).
    """
    field: str
    operator: str
    value: Any = None

    def to_json(self) -> Dict[str, Any]:
        return {"field": self.field, "operator": self.operator, "value": self.value}


@dataclass(frozen=True)
class AggregateSpec:
    """Aggregation over `field`; `alias` is the key in the response's aggregations map."""
    field: str
    type: AggregateType
    alias: str

    def to_json(self) -> Dict[str, Any]:
        return {"field": self.field, "type": AggregateType(self.type).value, "alias": self.alias}


@dataclass(frozen=True)
class OrderSpec:
    field: str
    descending: bool = False

    def to_json(self) -> Dict[str, Any]:
        return {"field": self.field, "order": "DESC" if self.descending else "ASC"}


@dataclass(frozen=True)
class QueryRequest:
    """Structured query sent to the backend's query endpoints.

    Fields:
        where: Filter clauses in caller order; empty means match all.
        aggregate: Aggregations in caller order; aliases are unique.
        select: Grouping/projection field names in caller order.
        order_by: Optional sort keys.
        limit: Optional row limit.
        offset: Optional row offset.
    """
    where: List[FilterClause] = field(default_factory=list)
    aggregate: List[AggregateSpec] = field(default_factory=list)
    select: List[str] = field(default_factory=list)
    order_by: List[OrderSpec] = field(default_factory=list)
    limit: Optional[int] = None
    offset: Optional[int] = None

    def to_json(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {
            "where": [c.to_json() for c in self.where],
            "aggregate": [a.to_json() for a in self.aggregate],
            "select": list(self.select),
        }
        if self.order_by:
            body["orderBy"] = [o.to_json() for o in self.order_by]
        if self.limit is not None:
            body["limit"] = self.limit
        if self.offset is not None:
            body["offset"] = self.offset
        return body


@dataclass(frozen=True)
class QueryResult:
    """Rows plus alias -> value aggregations returned by a query endpoint."""
    rows: List[Dict[str, Any]]
    aggregations: Dict[str, Any]

    @classmethod
    def from_json(cls, data: Any) -> "QueryResult":
        data = data or {}
        rows = [dict(r) for r in (data.get("rows") or []) if isinstance(r, dict)]
        return cls(rows=rows, aggregations=dict(data.get("aggregations") or {}))


@dataclass(frozen=True)
class RFMScore:
    """Per-user recency/frequency/monetary scores, each 1..5."""
    recency: int
    frequency: int
    monetary: int

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "RFMScore":
        def pick(name: str) -> int:
            value = data.get(name, data.get(f"{name}Score", 0))
            return int(value or 0)

        return cls(recency=pick("recency"), frequency=pick("frequency"), monetary=pick("monetary"))


@dataclass(frozen=True)
class CohortResult:
    """Retention triangle returned by the cohort endpoint.

    Fields:
        num_periods: Number of periods (and cohorts) analysed.
        cohort_sizes: Users per cohort, keyed by cohort index.
        retention_percentages: [cohort][offset] -> fraction in [0, 1].
        time_period: Period granularity echoed by the backend, if any.
    """
    num_periods: int
    cohort_sizes: Dict[int, int]
    retention_percentages: List[List[float]]
    time_period: Optional[str] = None

    def is_applicable(self, cohort_index: int, period_offset: int) -> bool:
        return period_offset < self.num_periods - cohort_index

    def retention(self, cohort_index: int, period_offset: int) -> float:
        try:
            return float(self.retention_percentages[cohort_index][period_offset])
        except (IndexError, TypeError, ValueError):
            return 0.0

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "CohortResult":
        sizes: Dict[int, int] = {}
        raw_sizes = data.get("cohortSizes")
        if isinstance(raw_sizes, dict):
            sizes = {int(k): int(v or 0) for k, v in raw_sizes.items()}
        elif isinstance(data.get("cohorts"), dict):
            sizes = {int(k): len(v or []) for k, v in data["cohorts"].items()}
        matrix = [[float(x or 0.0) for x in row] for row in (data.get("retentionPercentages") or [])]
        return cls(
            num_periods=int(data.get("numPeriods") or 0),
            cohort_sizes=sizes,
            retention_percentages=matrix,
            time_period=data.get("timePeriod"),
        )


@dataclass(frozen=True)
class PredictionResult:
    likelihood: float
    user_id: Optional[str] = None
    event_name: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "PredictionResult":
        return cls(
            likelihood=float(data.get("likelihood") or 0.0),
            user_id=data.get("userId"),
            event_name=data.get("eventName"),
        )


@dataclass(frozen=True)
class BestTimeResult:
    """Best hour of day (0..23) to reach a user; -1 when undeterminable."""
    best_hour: int
    user_id: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "BestTimeResult":
        raw = data.get("bestHour")
        return cls(best_hour=-1 if raw is None else int(raw), user_id=data.get("userId"))


@dataclass(frozen=True)
class RecommendationItem:
    item_id: str
    score: float

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "RecommendationItem":
        return cls(item_id=str(data.get("itemId", "")), score=float(data.get("score") or 0.0))


@dataclass(frozen=True)
class User:
    user_id: str
    properties: Dict[str, Any] = field(default_factory=dict)
    event_count: int = 0
    first_seen_at: Optional[int] = None
    last_seen_at: Optional[int] = None

    @property
    def name(self) -> Optional[str]:
        value = self.properties.get("name")
        return str(value) if value else None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "User":
        return cls(
            user_id=str(data.get("userId", "")),
            properties=dict(data.get("properties") or {}),
            event_count=int(data.get("eventCount") or 0),
            first_seen_at=data.get("firstSeenAt"),
            last_seen_at=data.get("lastSeenAt"),
        )


@dataclass(frozen=True)
class Event:
    event_id: str
    event_name: str
    user_id: str
    timestamp: Optional[int] = None
    properties: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> "Event":
        return cls(
            event_id=str(data.get("eventId", "")),
            event_name=str(data.get("eventName", "")),
            user_id=str(data.get("userId", "")),
            timestamp=data.get("timestamp"),
            properties=dict(data.get("properties") or {}),
        )
