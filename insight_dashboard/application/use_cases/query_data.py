from __future__ import annotations

from typing import List, Optional

from ...domain.errors import ValidationError
from ...domain.interfaces import AnalyticsBackend
from ...domain.models import AggregateSpec, AggregateType, QueryRequest, QueryResult
from ...infrastructure.logging import get_logger
from ..dto import DistributionRow
from ..query_builder import broadcast_aggregate, build_query

logger = get_logger("insight_dashboard.query")

QUERY_TARGETS = ("users", "events", "user-events")


class QueryDataUseCase:
    """Use-case: send a structured query to one of the query endpoints."""

    def __init__(self, backend: AnalyticsBackend) -> None:
        self._backend = backend

    def execute(self, target: str, query: QueryRequest, user_id: Optional[str] = None) -> QueryResult:
        if target not in QUERY_TARGETS:
            raise ValidationError(f"Unknown query target '{target}' (expected one of {', '.join(QUERY_TARGETS)})")
        logger.info(
            "Query request | target=%s | where=%d | aggregate=%d | select=%d",
            target,
            len(query.where),
            len(query.aggregate),
            len(query.select),
        )
        if target == "users":
            return self._backend.query_users(query)
        if target == "events":
            return self._backend.query_events(query)
        uid = (user_id or "").strip()
        if not uid:
            raise ValidationError("A user id is required to query a user's events")
        return self._backend.query_user_events(uid, query)

    def event_distribution(self) -> List[DistributionRow]:
        """Event names paired with the global event COUNT.

        The query groups by ``eventName`` but the count has no grouping field,
        so every label carries the same scalar.
        """
        query = build_query(
            [],
            [AggregateSpec(field="eventId", type=AggregateType.COUNT, alias="count")],
            ["eventName"],
        )
        result = self.execute("events", query)
        return [DistributionRow(label=label, value=value) for label, value in broadcast_aggregate(result, "eventName", "count")]
