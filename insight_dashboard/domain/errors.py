from __future__ import annotations


class DashboardError(RuntimeError):
    """Base for failures talking to the analytics backend."""


class NetworkError(DashboardError):
    """Raised when the backend cannot be reached (connection refused, timeout)."""


class RequestError(DashboardError):
    """Raised when the backend answers with a non-2xx status.

    Fields:
        status_code: HTTP status returned by the backend.
        body_text: Raw response body (the backend sends errors as plain text/JSON).
    """

    def __init__(self, status_code: int, body_text: str) -> None:
        self.status_code = int(status_code)
        self.body_text = body_text or ""
        super().__init__(f"API error ({self.status_code}): {self.body_text}")


class ValidationError(ValueError):
    """Raised for client-side input problems; nothing is sent to the backend."""
