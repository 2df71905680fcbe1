from __future__ import annotations

from .config import env_str

_DEFAULT_TIMEOUT = 15.0


def http_timeout_seconds() -> float:
    try:
        value = float(env_str("INSIGHTAXIS_HTTP_TIMEOUT", str(_DEFAULT_TIMEOUT)))
    except ValueError:
        return _DEFAULT_TIMEOUT
    return value if value > 0 else _DEFAULT_TIMEOUT
