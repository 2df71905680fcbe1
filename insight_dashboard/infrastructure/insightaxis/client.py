from __future__ import annotations

from typing import Any, Dict, List
from urllib.parse import quote

from ...domain.interfaces import AnalyticsBackend, Transport
from ...domain.models import (
    BestTimeResult,
    CohortResult,
    Event,
    PredictionResult,
    QueryRequest,
    QueryResult,
    RecommendationItem,
    RFMScore,
    TimePeriod,
    User,
)


def _seg(value: str) -> str:
    """Quote a value for use as a single path segment."""
    return quote(str(value), safe="")


class InsightAxisClient(AnalyticsBackend):
    """Backend adapter for the InsightAxisDB REST API."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    # --- Users ---
    def list_users(self) -> List[User]:
        return [User.from_json(u) for u in (self._transport.call("users") or [])]

    def get_user(self, user_id: str) -> User:
        return User.from_json(self._transport.call(f"users/{_seg(user_id)}") or {})

    def create_user(self, user_id: str, properties: Dict[str, Any]) -> Any:
        return self._transport.call("users", "POST", {"userId": user_id, "properties": properties})

    def update_user(self, user_id: str, properties: Dict[str, Any]) -> Any:
        return self._transport.call(f"users/{_seg(user_id)}", "PUT", {"properties": properties})

    def delete_user(self, user_id: str) -> Any:
        return self._transport.call(f"users/{_seg(user_id)}", "DELETE")

    def user_events(self, user_id: str) -> List[Event]:
        return [Event.from_json(e) for e in (self._transport.call(f"users/{_seg(user_id)}/events") or [])]

    # --- Events ---
    def list_events(self) -> List[Event]:
        return [Event.from_json(e) for e in (self._transport.call("events") or [])]

    def get_event(self, event_id: str) -> Event:
        return Event.from_json(self._transport.call(f"events/{_seg(event_id)}") or {})

    def create_event(self, event_name: str, user_id: str, properties: Dict[str, Any]) -> Any:
        body = {"eventName": event_name, "userId": user_id, "properties": properties}
        return self._transport.call("events", "POST", body)

    # --- Queries ---
    def query_users(self, query: QueryRequest) -> QueryResult:
        return QueryResult.from_json(self._transport.call("query/users", "POST", query.to_json()))

    def query_events(self, query: QueryRequest) -> QueryResult:
        return QueryResult.from_json(self._transport.call("query/events", "POST", query.to_json()))

    def query_user_events(self, user_id: str, query: QueryRequest) -> QueryResult:
        data = self._transport.call(f"query/users/{_seg(user_id)}/events", "POST", query.to_json())
        return QueryResult.from_json(data)

    # --- Segmentation ---
    def rfm_segmentation(self, recency_days: int, num_segments: int) -> Dict[str, RFMScore]:
        data = self._transport.call(
            "segmentation/rfm",
            params={"recencyDays": recency_days, "numSegments": num_segments},
        ) or {}
        return {str(uid): RFMScore.from_json(score or {}) for uid, score in data.items()}

    def cohort_analysis(self, time_period: TimePeriod, num_periods: int, target_event_name: str) -> CohortResult:
        data = self._transport.call(
            "segmentation/cohorts",
            params={
                "timePeriod": TimePeriod(time_period).value,
                "numPeriods": num_periods,
                "targetEventName": target_event_name,
            },
        )
        return CohortResult.from_json(data or {})

    # --- ML ---
    def recommendations(self, user_id: str, max_items: int) -> List[RecommendationItem]:
        data = self._transport.call(f"ml/recommendations/{_seg(user_id)}", params={"max": max_items})
        return [RecommendationItem.from_json(it) for it in (data or [])]

    def popular_items(self, max_items: int) -> List[RecommendationItem]:
        data = self._transport.call("ml/recommendations/popular", params={"max": max_items})
        return [RecommendationItem.from_json(it) for it in (data or [])]

    def prediction(self, user_id: str, event_name: str) -> PredictionResult:
        data = self._transport.call(f"ml/predictions/{_seg(user_id)}/{_seg(event_name)}")
        return PredictionResult.from_json(data or {})

    def best_time(self, user_id: str) -> BestTimeResult:
        return BestTimeResult.from_json(self._transport.call(f"ml/best-time/{_seg(user_id)}") or {})

    # --- System ---
    def system_config(self) -> Dict[str, Any]:
        return dict(self._transport.call("system/config") or {})

    def save_data(self) -> Any:
        return self._transport.call("system/save", "POST")

    def load_data(self) -> Any:
        return self._transport.call("system/load", "POST")
