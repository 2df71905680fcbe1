from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from .models import (
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


class Transport(ABC):
    """Port for the HTTP+JSON request/response wrapper."""

    @abstractmethod
    def call(
        self,
        endpoint: str,
        method: str = "GET",
        body: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send one request to `/api/{endpoint}` and return the decoded JSON.

        Raises:
            RequestError: Non-2xx status (carries status code and body text).
            NetworkError: Connection could not be established.
        """
        raise NotImplementedError


class AnalyticsBackend(ABC):
    """Port for the InsightAxisDB backend surface consumed by the dashboard."""

    # Users / events
    @abstractmethod
    def list_users(self) -> List[User]:
        raise NotImplementedError

    @abstractmethod
    def get_user(self, user_id: str) -> User:
        raise NotImplementedError

    @abstractmethod
    def create_user(self, user_id: str, properties: Dict[str, Any]) -> Any:
        raise NotImplementedError

    @abstractmethod
    def update_user(self, user_id: str, properties: Dict[str, Any]) -> Any:
        raise NotImplementedError

    @abstractmethod
    def delete_user(self, user_id: str) -> Any:
        raise NotImplementedError

    @abstractmethod
    def list_events(self) -> List[Event]:
        raise NotImplementedError

    @abstractmethod
    def get_event(self, event_id: str) -> Event:
        raise NotImplementedError

    @abstractmethod
    def create_event(self, event_name: str, user_id: str, properties: Dict[str, Any]) -> Any:
        raise NotImplementedError

    @abstractmethod
    def user_events(self, user_id: str) -> List[Event]:
        raise NotImplementedError

    # Queries
    @abstractmethod
    def query_users(self, query: QueryRequest) -> QueryResult:
        raise NotImplementedError

    @abstractmethod
    def query_events(self, query: QueryRequest) -> QueryResult:
        raise NotImplementedError

    @abstractmethod
    def query_user_events(self, user_id: str, query: QueryRequest) -> QueryResult:
        raise NotImplementedError

    # Segmentation
    @abstractmethod
    def rfm_segmentation(self, recency_days: int, num_segments: int) -> Dict[str, RFMScore]:
        """Return userId -> RFMScore in backend order."""
        raise NotImplementedError

    @abstractmethod
    def cohort_analysis(self, time_period: TimePeriod, num_periods: int, target_event_name: str) -> CohortResult:
        raise NotImplementedError

    # ML
    @abstractmethod
    def recommendations(self, user_id: str, max_items: int) -> List[RecommendationItem]:
        """Return items already ranked by the backend."""
        raise NotImplementedError

    @abstractmethod
    def popular_items(self, max_items: int) -> List[RecommendationItem]:
        raise NotImplementedError

    @abstractmethod
    def prediction(self, user_id: str, event_name: str) -> PredictionResult:
        raise NotImplementedError

    @abstractmethod
    def best_time(self, user_id: str) -> BestTimeResult:
        raise NotImplementedError

    # System
    @abstractmethod
    def system_config(self) -> Dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def save_data(self) -> Any:
        raise NotImplementedError

    @abstractmethod
    def load_data(self) -> Any:
        raise NotImplementedError
