"""
Unit tests for application use cases.

The backend port is mocked; tests check validation happens before any call
and that results come back classified and in backend order.
"""

import pytest

from insight_dashboard.application.dto import CohortRequest, CreateEventRequest, CreateUserRequest, RFMRequest
from insight_dashboard.application.query_builder import build_query
from insight_dashboard.application.use_cases.entities import EntityUseCase
from insight_dashboard.application.use_cases.ml_insights import MLInsightsUseCase
from insight_dashboard.application.use_cases.query_data import QueryDataUseCase
from insight_dashboard.application.use_cases.segmentation import NOT_APPLICABLE, SegmentationUseCase
from insight_dashboard.domain.errors import ValidationError
from insight_dashboard.domain.models import (
    Band,
    BestTimeResult,
    CohortResult,
    Event,
    PredictionResult,
    QueryResult,
    RecommendationItem,
    RFMScore,
    TimePeriod,
    User,
)


class TestQueryData:
    def test_event_distribution_broadcasts_global_count(self, mock_backend):
        """Both labels show the scalar 42, not a per-label split."""
        mock_backend.query_events.return_value = QueryResult(
            rows=[{"eventName": "view"}, {"eventName": "purchase"}], aggregations={"count": 42}
        )

        rows = QueryDataUseCase(mock_backend).event_distribution()

        sent = mock_backend.query_events.call_args[0][0]
        assert sent.to_json() == {
            "where": [],
            "aggregate": [{"field": "eventId", "type": "COUNT", "alias": "count"}],
            "select": ["eventName"],
        }
        assert [(r.label, r.value) for r in rows] == [("view", 42), ("purchase", 42)]

    def test_user_events_target_requires_user(self, mock_backend):
        with pytest.raises(ValidationError):
            QueryDataUseCase(mock_backend).execute("user-events", build_query([], [], []))
        mock_backend.query_user_events.assert_not_called()

    def test_unknown_target(self, mock_backend):
        with pytest.raises(ValidationError):
            QueryDataUseCase(mock_backend).execute("items", build_query([], [], []))

    def test_users_target(self, mock_backend):
        mock_backend.query_users.return_value = QueryResult(rows=[], aggregations={})
        QueryDataUseCase(mock_backend).execute("users", build_query([], [], []))
        mock_backend.query_users.assert_called_once()


class TestSegmentation:
    def test_rfm_rows_in_backend_order(self, mock_backend):
        mock_backend.rfm_segmentation.return_value = {
            "u3": RFMScore(3, 3, 3),
            "u1": RFMScore(5, 5, 5),
            "u2": RFMScore(1, 5, 5),
        }

        rows = SegmentationUseCase(mock_backend).rfm(RFMRequest())

        mock_backend.rfm_segmentation.assert_called_once_with(30, 5)
        assert [r.user_id for r in rows] == ["u3", "u1", "u2"]
        assert [r.band for r in rows] == [Band.MEDIUM, Band.HIGH, Band.LOW]
        assert rows[1].label == "5-5-5"

    def test_rfm_rejects_non_numeric_input(self, mock_backend):
        with pytest.raises(ValidationError):
            SegmentationUseCase(mock_backend).rfm(RFMRequest(recency_days="abc"))
        mock_backend.rfm_segmentation.assert_not_called()

    def test_cohort_matrix_triangle(self, mock_backend):
        mock_backend.cohort_analysis.return_value = CohortResult(
            num_periods=3,
            cohort_sizes={0: 10, 1: 8, 2: 5},
            retention_percentages=[[1.0, 0.5, 0.2], [1.0, 0.3, 0.0], [0.75, 0.0, 0.0]],
        )

        matrix = SegmentationUseCase(mock_backend).cohorts(CohortRequest(time_period="month"))

        mock_backend.cohort_analysis.assert_called_once_with(TimePeriod.MONTH, 4, "login")
        last = matrix.rows[2]
        assert last.size == 5
        assert last.cells[0].text == "75.0%"
        assert last.cells[0].band is Band.HIGH
        assert [c.applicable for c in last.cells] == [True, False, False]
        assert last.cells[1].text == NOT_APPLICABLE
        assert last.cells[1].band is None
        assert matrix.rows[0].cells[2].band is Band.LOW
        assert matrix.rows[1].cells[1].band is Band.MEDIUM

    def test_cohort_unknown_period(self, mock_backend):
        with pytest.raises(ValidationError, match="Unknown time period"):
            SegmentationUseCase(mock_backend).cohorts(CohortRequest(time_period="DECADE"))


class TestMLInsights:
    def test_recommendations_scores(self, mock_backend):
        mock_backend.recommendations.return_value = [RecommendationItem("i1", 0.987), RecommendationItem("i2", 0.5)]
        rows = MLInsightsUseCase(mock_backend).recommendations("u1", "3")

        mock_backend.recommendations.assert_called_once_with("u1", 3)
        assert [(r.item_id, r.score_text) for r in rows] == [("i1", "0.99"), ("i2", "0.50")]

    def test_recommendations_need_user(self, mock_backend):
        with pytest.raises(ValidationError):
            MLInsightsUseCase(mock_backend).recommendations("  ")

    def test_prediction_view(self, mock_backend):
        mock_backend.prediction.return_value = PredictionResult(likelihood=0.305)
        view = MLInsightsUseCase(mock_backend).prediction("u1", "purchase")
        assert view.percentage_text == "30.5%"
        assert view.band is Band.MEDIUM

    def test_best_time_undeterminable(self, mock_backend):
        mock_backend.best_time.return_value = BestTimeResult(best_hour=-1)
        view = MLInsightsUseCase(mock_backend).best_time("u1")
        assert view.determinable is False
        assert view.text == "undeterminable"

    def test_best_time_hour(self, mock_backend):
        mock_backend.best_time.return_value = BestTimeResult(best_hour=13)
        assert MLInsightsUseCase(mock_backend).best_time("u1").text == "1 PM"


class TestEntities:
    def test_create_user_requires_fields(self, mock_backend):
        with pytest.raises(ValidationError, match="Email"):
            EntityUseCase(mock_backend).create_user(CreateUserRequest("u1", "Ada", ""))
        mock_backend.create_user.assert_not_called()

    def test_create_user_properties(self, mock_backend):
        EntityUseCase(mock_backend).create_user(CreateUserRequest(" u1 ", "Ada", "ada@x.io", age="36"))
        mock_backend.create_user.assert_called_once_with(
            "u1", {"name": "Ada", "email": "ada@x.io", "country": "", "age": 36}
        )

    def test_create_user_bad_age(self, mock_backend):
        with pytest.raises(ValidationError):
            EntityUseCase(mock_backend).create_user(CreateUserRequest("u1", "Ada", "a@x", age="old"))

    def test_create_event_coerces_numbers(self, mock_backend):
        req = CreateEventRequest("purchase", "u1", {"item_id": "i1", "price": "19.99", "quantity": "2"})
        EntityUseCase(mock_backend).create_event(req)
        mock_backend.create_event.assert_called_once_with(
            "purchase", "u1", {"item_id": "i1", "price": 19.99, "quantity": 2}
        )

    def test_create_event_needs_user(self, mock_backend):
        with pytest.raises(ValidationError):
            EntityUseCase(mock_backend).create_event(CreateEventRequest("login", ""))

    def test_list_events_limit(self, mock_backend):
        mock_backend.list_events.return_value = [Event(str(i), "login", "u1") for i in range(15)]
        assert len(EntityUseCase(mock_backend).list_events(10)) == 10

    def test_user_choices_label(self, mock_backend):
        mock_backend.list_users.return_value = [User("u1", {"name": "Ada"}), User("u2")]
        assert EntityUseCase(mock_backend).user_choices() == [("u1", "u1 (Ada)"), ("u2", "u2 (Unknown)")]

    def test_update_user_coerces_age(self, mock_backend):
        EntityUseCase(mock_backend).update_user("u1", {"country": "DE", "age": "41"})
        mock_backend.update_user.assert_called_once_with("u1", {"country": "DE", "age": 41})

    def test_update_user_needs_properties(self, mock_backend):
        with pytest.raises(ValidationError, match="at least one property"):
            EntityUseCase(mock_backend).update_user("u1", {})
        mock_backend.update_user.assert_not_called()

    def test_get_event_requires_id(self, mock_backend):
        with pytest.raises(ValidationError):
            EntityUseCase(mock_backend).get_event("  ")
        mock_backend.get_event.assert_not_called()
