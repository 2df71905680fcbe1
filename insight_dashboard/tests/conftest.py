"""
Pytest configuration and fixtures for dashboard tests.

Provides a mocked backend and transport plus a clean configuration
environment so no test ever reaches a real InsightAxisDB server.
"""

from unittest.mock import Mock
import pytest

from insight_dashboard.domain.interfaces import AnalyticsBackend, Transport
from insight_dashboard.domain.models import QueryResult


@pytest.fixture
def mock_backend():
    """Mock backend speccing the AnalyticsBackend port."""
    mock = Mock(spec=AnalyticsBackend)
    mock.list_users.return_value = []
    mock.list_events.return_value = []
    mock.query_events.return_value = QueryResult(rows=[], aggregations={})
    return mock


@pytest.fixture
def mock_transport():
    """Mock transport; ``call`` returns None unless a test overrides it."""
    mock = Mock(spec=Transport)
    mock.call.return_value = None
    return mock


@pytest.fixture
def clean_environment(monkeypatch, tmp_path):
    """Clear dashboard env vars and run from an empty directory (no .env)."""
    for name in (
        "INSIGHTAXIS_URL",
        "INSIGHTAXIS_HTTP_TIMEOUT",
        "INSIGHTAXIS_LOG_LEVEL",
        "INSIGHTAXIS_EVENTS_LIMIT",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
