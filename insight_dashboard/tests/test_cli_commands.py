"""
Unit tests for dashboard CLI command parsing and dispatch.

Commands run against a mocked backend and print JSON to stdout.
"""

import json
from unittest.mock import patch

import pytest
import requests

from insight_dashboard.cli.main import dispatch_commands, run
from insight_dashboard.cli.parsers import build_parser
from insight_dashboard.domain.errors import NetworkError, RequestError
from insight_dashboard.domain.models import CohortResult, Event, QueryResult, RFMScore, TimePeriod


def _out(capsys):
    return json.loads(capsys.readouterr().out)


class TestCommandParsing:
    """Test CLI argument parsing."""

    def test_help_exits(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["--help"])

    def test_query_args(self):
        args = build_parser().parse_args(
            [
                "query", "events",
                "--where", "country:EQ:US",
                "--aggregate", "eventId:COUNT:count",
                "--select", "eventName",
                "--order-by", "eventName:DESC",
                "--limit", "5",
            ]
        )
        assert args.cmd == "query"
        assert args.target == "events"
        assert args.where == ["country:EQ:US"]
        assert args.aggregate == ["eventId:COUNT:count"]
        assert args.select == ["eventName"]
        assert args.order_by == ["eventName:DESC"]
        assert args.limit == 5

    def test_segmentation_defaults(self):
        rfm = build_parser().parse_args(["rfm"])
        assert (rfm.recency_days, rfm.segments) == (30, 5)
        co = build_parser().parse_args(["cohorts", "--period", "month"])
        assert (co.period, co.periods, co.event) == ("MONTH", 4, "login")

    def test_user_alias_flags(self):
        assert build_parser().parse_args(["recommend", "--user-id", "u1"]).user_id == "u1"
        assert build_parser().parse_args(["best-time", "--id", "u2"]).user_id == "u2"

    def test_unknown_query_target_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["query", "items"])

    def test_where_help_lists_known_operators(self, capsys):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["query", "--help"])
        help_text = capsys.readouterr().out
        assert "GTE" in help_text
        assert "STARTS_WITH" in help_text


class TestDispatch:
    """Test command dispatch against a mocked backend."""

    def test_query_broadcast_output(self, mock_backend, capsys):
        mock_backend.query_events.return_value = QueryResult(
            rows=[{"eventName": "view"}, {"eventName": "purchase"}], aggregations={"count": 42}
        )
        ns = build_parser().parse_args(["event-distribution"])

        assert dispatch_commands(ns, mock_backend) == 0

        out = _out(capsys)
        assert out["status"] == "ok"
        assert out["distribution"] == [{"label": "view", "value": 42}, {"label": "purchase", "value": 42}]

    def test_query_sends_parsed_clauses(self, mock_backend, capsys):
        mock_backend.query_users.return_value = QueryResult(rows=[{"country": "US"}], aggregations={"n": 3})
        ns = build_parser().parse_args(
            ["query", "users", "--where", "age:GTE:30", "--aggregate", "userId:count:n", "--select", "country"]
        )

        dispatch_commands(ns, mock_backend)

        sent = mock_backend.query_users.call_args[0][0]
        assert sent.to_json()["where"] == [{"field": "age", "operator": "GTE", "value": 30}]
        out = _out(capsys)
        assert out["rows"] == [{"country": "US"}]
        assert out["aggregations"] == {"n": 3}

    def test_rfm_output(self, mock_backend, capsys):
        mock_backend.rfm_segmentation.return_value = {"u1": RFMScore(1, 5, 5)}
        ns = build_parser().parse_args(["rfm", "--recency-days", "60"])

        dispatch_commands(ns, mock_backend)

        mock_backend.rfm_segmentation.assert_called_once_with(60, 5)
        seg = _out(capsys)["segments"][0]
        assert seg["user_id"] == "u1"
        assert seg["label"] == "1-5-5"
        assert seg["band"] == "LOW"

    def test_cohorts_call(self, mock_backend, capsys):
        mock_backend.cohort_analysis.return_value = CohortResult(1, {0: 4}, [[1.0]])
        ns = build_parser().parse_args(["cohorts", "--period", "day", "--periods", "1", "--event", "purchase"])

        dispatch_commands(ns, mock_backend)

        mock_backend.cohort_analysis.assert_called_once_with(TimePeriod.DAY, 1, "purchase")
        assert _out(capsys)["cohorts"]["rows"][0]["cells"][0]["text"] == "100.0%"

    def test_create_event_props(self, mock_backend, capsys):
        ns = build_parser().parse_args(
            ["create-event", "--name", "purchase", "--user-id", "u1", "--prop", "price=9.5", "--prop", "quantity=2"]
        )
        dispatch_commands(ns, mock_backend)
        mock_backend.create_event.assert_called_once_with("purchase", "u1", {"price": 9.5, "quantity": 2})

    def test_update_user_props(self, mock_backend, capsys):
        ns = build_parser().parse_args(["update-user", "--id", "u1", "--set", "country=DE", "--set", "age=41"])

        assert dispatch_commands(ns, mock_backend) == 0

        mock_backend.update_user.assert_called_once_with("u1", {"country": "DE", "age": 41})
        assert _out(capsys)["status"] == "ok"

    def test_event_lookup(self, mock_backend, capsys):
        mock_backend.get_event.return_value = Event("e7", "login", "u1", 1700000000000)
        ns = build_parser().parse_args(["event", "--id", "e7"])

        dispatch_commands(ns, mock_backend)

        mock_backend.get_event.assert_called_once_with("e7")
        out = _out(capsys)["event"]
        assert (out["event_id"], out["event_name"], out["user_id"]) == ("e7", "login", "u1")


class TestRunExitCodes:
    """Test exit codes and error payloads."""

    @patch("insight_dashboard.cli.main.build_backend")
    def test_request_error_exit_3(self, mock_build, mock_backend, capsys):
        mock_backend.rfm_segmentation.side_effect = RequestError(500, "boom")
        mock_build.return_value = mock_backend

        assert run(["rfm"]) == 3

        out = _out(capsys)
        assert out["status"] == "error"
        assert out["status_code"] == 500
        assert out["body"] == "boom"
        assert "500" in out["error"] and "boom" in out["error"]

    @patch("insight_dashboard.cli.main.build_backend")
    def test_network_error_exit_3(self, mock_build, mock_backend, capsys):
        mock_backend.list_users.side_effect = NetworkError("refused")
        mock_build.return_value = mock_backend
        assert run(["users"]) == 3
        assert _out(capsys)["kind"] == "NetworkError"

    @patch("insight_dashboard.cli.main.build_backend")
    def test_validation_error_exit_2_and_nothing_sent(self, mock_build, mock_backend, capsys):
        mock_build.return_value = mock_backend
        code = run(["query", "events", "--aggregate", "price:SUM:x", "--aggregate", "price:AVG:x"])

        assert code == 2
        assert "Duplicate aggregate alias" in _out(capsys)["error"]
        mock_backend.query_events.assert_not_called()

    @patch("insight_dashboard.cli.main.build_backend")
    def test_non_finite_filter_exit_2_and_nothing_sent(self, mock_build, mock_backend, capsys):
        mock_build.return_value = mock_backend
        code = run(["query", "events", "--where", "score:GT:NaN"])

        assert code == 2
        assert _out(capsys)["kind"] == "ValidationError"
        mock_backend.query_events.assert_not_called()

    @patch("insight_dashboard.infrastructure.http.transport.requests.request")
    def test_url_without_scheme_exit_3(self, mock_request, capsys):
        mock_request.side_effect = requests.exceptions.InvalidSchema(
            "No connection adapters were found for 'localhost:8080/api/users'"
        )

        assert run(["--url", "localhost:8080", "users"]) == 3
        assert _out(capsys)["kind"] == "NetworkError"

    @patch("insight_dashboard.cli.main.build_backend")
    def test_url_flag_passed_to_backend(self, mock_build, mock_backend, capsys):
        mock_build.return_value = mock_backend
        assert run(["--url", "http://other:1234", "users"]) == 0
        mock_build.assert_called_once_with("http://other:1234")
        assert _out(capsys) == {"status": "ok", "users": []}
