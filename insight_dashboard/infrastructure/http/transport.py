from __future__ import annotations

from typing import Any, Dict, Optional

import requests

from ...domain.errors import NetworkError, RequestError, ValidationError
from ...domain.interfaces import Transport
from ..config import api_base_url
from ..logging import get_logger
from ..timeouts import http_timeout_seconds

logger = get_logger("insight_dashboard.transport")


class RequestsTransport(Transport):
    """HTTP+JSON transport for the InsightAxisDB REST API.

    Every call goes to ``{base_url}/api/{endpoint}``. Bodies are JSON encoded,
    responses JSON decoded. Errors are never retried here.

    Without an injected ``session`` each call is a plain ``requests.request``,
    so calls from pool workers never share connection state.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._base_url = (base_url or api_base_url()).rstrip("/")
        self._timeout = timeout if timeout is not None else http_timeout_seconds()
        self._session = session

    @property
    def base_url(self) -> str:
        return self._base_url

    def url_for(self, endpoint: str) -> str:
        return f"{self._base_url}/api/{endpoint.lstrip('/')}"

    def call(
        self,
        endpoint: str,
        method: str = "GET",
        body: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        url = self.url_for(endpoint)
        method = method.upper()
        headers = {"Accept": "application/json"}
        if body is not None:
            headers["Content-Type"] = "application/json"
        send = self._session.request if self._session is not None else requests.request
        try:
            r = send(
                method,
                url,
                json=body,
                params=params,
                headers=headers,
                timeout=self._timeout,
            )
        except requests.exceptions.InvalidJSONError as e:
            raise ValidationError(f"Request body for {endpoint} is not valid JSON: {e}") from e
        except (requests.ConnectionError, requests.Timeout) as e:
            logger.warning("Request failed | %s %s | %s", method, endpoint, e)
            raise NetworkError(f"Could not reach {url}: {e}") from e
        except requests.RequestException as e:
            # bad scheme/URL, broken chunked body, redirect loops
            logger.warning("Request failed | %s %s | %s", method, endpoint, e)
            raise NetworkError(f"Request to {url} failed: {e}") from e

        logger.debug("%s %s -> %d", method, endpoint, r.status_code)
        if not 200 <= r.status_code < 300:
            logger.warning("API error | %s %s | status=%d", method, endpoint, r.status_code)
            raise RequestError(r.status_code, r.text)

        if not (r.content or b"").strip():
            return None
        try:
            return r.json()
        except ValueError as e:
            raise RequestError(r.status_code, r.text) from e
