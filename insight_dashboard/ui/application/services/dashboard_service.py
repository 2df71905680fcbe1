"""
Dashboard Service.

Business logic behind every operator action in the dashboard window.
"""
from __future__ import annotations
import json
from typing import Callable, List, Optional, Sequence, Tuple

from ....application.dto import CohortRequest, CreateEventRequest, CreateUserRequest, RFMRequest
from ....application.query_builder import build_query
from ....application.use_cases.entities import EntityUseCase
from ....application.use_cases.ml_insights import MLInsightsUseCase
from ....application.use_cases.query_data import QUERY_TARGETS, QueryDataUseCase
from ....application.use_cases.segmentation import SegmentationUseCase, parse_time_period
from ....application.validators import parse_positive_int, require_text
from ....domain.errors import DashboardError, NetworkError, ValidationError
from ....domain.interfaces import AnalyticsBackend
from ....domain.models import AggregateSpec, FilterClause, OrderSpec
from ....infrastructure.config import events_table_limit
from ...shared.dto import ActionOutcome, RegionSnapshot, TableView
from ...state import DisplayState
from ..interfaces.logger import ILogger
from .view_formatter import ViewFormatter

REGION_USERS = "users"
REGION_USER_EVENTS = "user-events"
REGION_EVENTS = "events"
REGION_DISTRIBUTION = "event-distribution"
REGION_QUERY = "query"
REGION_RFM = "rfm"
REGION_COHORTS = "cohorts"
REGION_RECOMMENDATIONS = "recommendations"
REGION_POPULAR = "popular"
REGION_PREDICTION = "prediction"
REGION_BEST_TIME = "best-time"


def error_message(context: str, ex: DashboardError) -> str:
    """Inline message for a failed request, scoped to the action that issued it."""
    if isinstance(ex, NetworkError):
        return f"{context}: network error: {ex}"
    return f"{context}: {ex}"


class DashboardService:
    """Service for dashboard views and actions.

    Region methods validate their input first (``ValidationError`` propagates
    and nothing is sent), then take a generation token, call the backend and
    settle the region. They return the resulting ``RegionSnapshot``; a stale
    snapshot means a newer request for the same region was issued meanwhile.
    """

    def __init__(self, backend: AnalyticsBackend, logger: ILogger, state: Optional[DisplayState] = None):
        """Initialize service with dependencies."""
        self._logger = logger
        self._state = state or DisplayState()
        self._formatter = ViewFormatter()
        self._entities = EntityUseCase(backend)
        self._query = QueryDataUseCase(backend)
        self._segmentation = SegmentationUseCase(backend)
        self._ml = MLInsightsUseCase(backend)

    @property
    def state(self) -> DisplayState:
        return self._state

    def _render(self, region: str, context: str, fetch: Callable[[], TableView]) -> RegionSnapshot:
        token = self._state.begin(region)
        try:
            view = fetch()
        except DashboardError as e:
            message = error_message(context, e)
            self._logger.error(message)
            return self._state.fail(region, token, message)
        snap = self._state.commit(region, token, view)
        if snap.stale:
            self._logger.warning(f"Discarded stale response for '{region}'")
        return snap

    # ----- Users & events -----
    def load_users(self) -> RegionSnapshot:
        return self._render(
            REGION_USERS,
            "Error loading users",
            lambda: self._formatter.users_table(self._entities.list_users()),
        )

    def show_user_events(self, user_id: str) -> RegionSnapshot:
        uid = require_text(user_id, "User id")
        return self._render(
            REGION_USER_EVENTS,
            "Error loading user events",
            lambda: self._formatter.events_table(
                self._entities.user_events(uid), title=f"Events for user {uid}", with_user=False
            ),
        )

    def load_events(self, limit: Optional[int] = None) -> RegionSnapshot:
        count = parse_positive_int(limit, "Limit") if limit is not None else events_table_limit()
        return self._render(
            REGION_EVENTS,
            "Error loading events",
            lambda: self._formatter.events_table(self._entities.list_events(count)),
        )

    def user_choices(self) -> List[Tuple[str, str]]:
        """Options for user pickers; failures are logged and yield no options."""
        try:
            return self._entities.user_choices()
        except DashboardError as e:
            self._logger.error(error_message("Error loading users for selection", e))
            return []

    # ----- Queries -----
    def load_event_distribution(self) -> RegionSnapshot:
        return self._render(
            REGION_DISTRIBUTION,
            "Error loading event distribution",
            lambda: self._formatter.distribution_table(self._query.event_distribution()),
        )

    def run_query(
        self,
        target: str,
        filters: Sequence[FilterClause],
        aggregates: Sequence[AggregateSpec],
        select_fields: Sequence[str],
        order_by: Optional[Sequence[OrderSpec]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> RegionSnapshot:
        if target not in QUERY_TARGETS:
            raise ValidationError(f"Unknown query target '{target}'")
        if target == "user-events":
            user_id = require_text(user_id, "User id")
        query = build_query(filters, aggregates, select_fields, order_by=order_by, limit=limit, offset=offset)
        self._logger.info(f"Running query on {target}")
        return self._render(
            REGION_QUERY,
            "Error running query",
            lambda: self._formatter.query_table(query, self._query.execute(target, query, user_id=user_id)),
        )

    # ----- Segmentation -----
    def run_rfm(self, recency_days: object = 30, num_segments: object = 5) -> RegionSnapshot:
        req = RFMRequest(
            recency_days=parse_positive_int(recency_days, "Recency days"),
            num_segments=parse_positive_int(num_segments, "Number of segments"),
        )
        self._logger.info(f"Running RFM analysis (recency={req.recency_days}d, segments={req.num_segments})")
        return self._render(
            REGION_RFM,
            "Error running RFM analysis",
            lambda: self._formatter.rfm_table(self._segmentation.rfm(req)),
        )

    def run_cohorts(self, time_period: object = "WEEK", num_periods: object = 4, target_event_name: str = "login") -> RegionSnapshot:
        req = CohortRequest(
            time_period=parse_time_period(time_period),
            num_periods=parse_positive_int(num_periods, "Number of periods"),
            target_event_name=require_text(target_event_name, "Target event name"),
        )
        self._logger.info(f"Running cohort analysis ({req.time_period.value}, {req.num_periods} periods)")
        return self._render(
            REGION_COHORTS,
            "Error running cohort analysis",
            lambda: self._formatter.cohort_table(self._segmentation.cohorts(req)),
        )

    # ----- ML -----
    def recommendations(self, user_id: str, max_items: object = 5) -> RegionSnapshot:
        uid = require_text(user_id, "User")
        count = parse_positive_int(max_items, "Count")
        return self._render(
            REGION_RECOMMENDATIONS,
            "Error getting recommendations",
            lambda: self._formatter.scores_table(
                self._ml.recommendations(uid, count),
                title=f"Recommendations for {uid}",
                empty_message="No recommendations found",
            ),
        )

    def popular_items(self, max_items: object = 5) -> RegionSnapshot:
        count = parse_positive_int(max_items, "Count")
        return self._render(
            REGION_POPULAR,
            "Error getting popular items",
            lambda: self._formatter.scores_table(
                self._ml.popular_items(count), title="Popular Items", empty_message="No popular items found"
            ),
        )

    def prediction(self, user_id: str, event_name: str) -> RegionSnapshot:
        uid = require_text(user_id, "User")
        name = require_text(event_name, "Event name")
        return self._render(
            REGION_PREDICTION,
            "Error getting prediction",
            lambda: self._formatter.prediction_card(self._ml.prediction(uid, name)),
        )

    def best_time(self, user_id: str) -> RegionSnapshot:
        uid = require_text(user_id, "User")
        return self._render(
            REGION_BEST_TIME,
            "Error getting best time",
            lambda: self._formatter.best_time_card(self._ml.best_time(uid)),
        )

    # ----- Actions -----
    def _act(self, context: str, success: str, action: Callable[[], object]) -> ActionOutcome:
        try:
            action()
        except DashboardError as e:
            message = error_message(context, e)
            self._logger.error(message)
            return ActionOutcome(False, message)
        self._logger.info(success)
        return ActionOutcome(True, success)

    def create_user(self, req: CreateUserRequest) -> ActionOutcome:
        uid = require_text(req.user_id, "User id")
        return self._act("Error creating user", f"User {uid} created", lambda: self._entities.create_user(req))

    def delete_user(self, user_id: str) -> ActionOutcome:
        uid = require_text(user_id, "User id")
        return self._act("Error deleting user", f"User {uid} deleted", lambda: self._entities.delete_user(uid))

    def create_event(self, req: CreateEventRequest) -> ActionOutcome:
        name = require_text(req.event_name, "Event type")
        return self._act("Error creating event", f"Event '{name}' created", lambda: self._entities.create_event(req))

    def save_data(self) -> ActionOutcome:
        return self._act("Error saving data", "Data saved", self._entities.save_data)

    def load_data(self) -> ActionOutcome:
        return self._act("Error loading data", "Data loaded", self._entities.load_data)

    def system_config(self) -> ActionOutcome:
        """Server configuration as indented JSON in the outcome message."""
        try:
            config = self._entities.system_config()
        except DashboardError as e:
            message = error_message("Error loading server config", e)
            self._logger.error(message)
            return ActionOutcome(False, message)
        return ActionOutcome(True, json.dumps(config, indent=2, sort_keys=True, default=str))
