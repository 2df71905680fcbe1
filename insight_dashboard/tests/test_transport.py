"""
Unit tests for the requests-based transport.

``requests.Session.request`` or ``requests.request`` is always mocked; no socket is opened.
"""

from unittest.mock import Mock, patch

import pytest
import requests

from insight_dashboard.domain.errors import NetworkError, RequestError, ValidationError
from insight_dashboard.infrastructure.http.transport import RequestsTransport


def _response(status=200, json_data=None, text="", content=None):
    r = Mock()
    r.status_code = status
    r.text = text
    r.content = content if content is not None else (text.encode() if text else b'{"ok": true}')
    if isinstance(json_data, Exception):
        r.json.side_effect = json_data
    else:
        r.json.return_value = json_data
    return r


@pytest.fixture
def session():
    return Mock(spec=requests.Session)


@pytest.fixture
def transport(session):
    return RequestsTransport(base_url="http://backend:8080/", timeout=3.0, session=session)


class TestRequestShape:
    """Test URL, method, headers and body encoding."""

    def test_get_without_body(self, transport, session):
        session.request.return_value = _response(json_data=[{"userId": "u1"}])

        data = transport.call("users")

        assert data == [{"userId": "u1"}]
        session.request.assert_called_once_with(
            "GET",
            "http://backend:8080/api/users",
            json=None,
            params=None,
            headers={"Accept": "application/json"},
            timeout=3.0,
        )

    def test_post_sends_json_content_type(self, transport, session):
        session.request.return_value = _response(json_data={"created": True})

        transport.call("events", "post", {"eventName": "login"})

        _, kwargs = session.request.call_args
        assert session.request.call_args[0][0] == "POST"
        assert kwargs["json"] == {"eventName": "login"}
        assert kwargs["headers"]["Content-Type"] == "application/json"

    def test_query_params_passed_through(self, transport, session):
        session.request.return_value = _response(json_data={})

        transport.call("segmentation/rfm", params={"recencyDays": 30, "numSegments": 5})

        assert session.request.call_args[1]["params"] == {"recencyDays": 30, "numSegments": 5}

    def test_base_url_trailing_slash_stripped(self, transport):
        assert transport.base_url == "http://backend:8080"
        assert transport.url_for("/users") == "http://backend:8080/api/users"


class TestResponses:
    """Test status handling and decoding."""

    def test_non_2xx_raises_request_error_with_status_and_body(self, transport, session):
        session.request.return_value = _response(status=500, text="boom")

        with pytest.raises(RequestError) as exc:
            transport.call("segmentation/rfm")

        assert exc.value.status_code == 500
        assert exc.value.body_text == "boom"
        assert str(exc.value) == "API error (500): boom"

    def test_404_is_request_error(self, transport, session):
        session.request.return_value = _response(status=404, text="User not found")
        with pytest.raises(RequestError, match="404"):
            transport.call("users/nobody")

    def test_empty_body_returns_none(self, transport, session):
        session.request.return_value = _response(status=204, content=b"")
        assert transport.call("users/u1", "DELETE") is None
        session.request.return_value.json.assert_not_called()

    def test_invalid_json_on_success_raises(self, transport, session):
        session.request.return_value = _response(status=200, text="<html>", json_data=ValueError("bad json"))
        with pytest.raises(RequestError):
            transport.call("users")

    def test_no_retry(self, transport, session):
        session.request.return_value = _response(status=503, text="busy")
        with pytest.raises(RequestError):
            transport.call("users")
        assert session.request.call_count == 1


class TestNetworkFailures:
    @pytest.mark.parametrize(
        "exc",
        [
            requests.ConnectionError("refused"),
            requests.Timeout("slow"),
            requests.exceptions.InvalidSchema("No connection adapters were found for 'localhost:8080/api/users'"),
            requests.exceptions.MissingSchema("Invalid URL 'backend/api/users': No scheme supplied"),
            requests.exceptions.InvalidURL("Invalid URL"),
            requests.exceptions.ChunkedEncodingError("Connection broken"),
            requests.exceptions.TooManyRedirects("Exceeded 30 redirects."),
        ],
    )
    def test_connection_problems_raise_network_error(self, transport, session, exc):
        session.request.side_effect = exc
        with pytest.raises(NetworkError) as raised:
            transport.call("users")
        assert raised.value.__cause__ is exc

    def test_unencodable_body_is_validation_error(self, transport, session):
        session.request.side_effect = requests.exceptions.InvalidJSONError(
            "Out of range float values are not JSON compliant"
        )
        with pytest.raises(ValidationError):
            transport.call("query/events", "POST", {"where": [{"value": float("nan")}]})


class TestPerCallRequests:
    """Without an injected session every call is a standalone request."""

    @patch("insight_dashboard.infrastructure.http.transport.requests.request")
    def test_plain_request_used_without_session(self, mock_request):
        mock_request.return_value = _response(json_data=[])

        t = RequestsTransport(base_url="http://backend:8080", timeout=2.0)
        t.call("users")
        t.call("events")

        assert mock_request.call_count == 2
        assert mock_request.call_args_list[0][0] == ("GET", "http://backend:8080/api/users")

    @patch("insight_dashboard.infrastructure.http.transport.requests.request")
    def test_misconfigured_url_surfaces_as_network_error(self, mock_request):
        mock_request.side_effect = requests.exceptions.InvalidSchema(
            "No connection adapters were found for 'localhost:8080/api/users'"
        )

        with pytest.raises(NetworkError, match="localhost:8080"):
            RequestsTransport(base_url="localhost:8080", timeout=2.0).call("users")


class TestDefaults:
    def test_defaults_come_from_environment(self, clean_environment, monkeypatch):
        monkeypatch.setenv("INSIGHTAXIS_URL", "http://analytics:9000/")
        monkeypatch.setenv("INSIGHTAXIS_HTTP_TIMEOUT", "7.5")

        t = RequestsTransport(session=Mock(spec=requests.Session))

        assert t.base_url == "http://analytics:9000"
        assert t._timeout == 7.5
