from __future__ import annotations

import contextlib
import os
from pathlib import Path
from typing import Dict, Optional


def parse_dotenv(dotenv_path: Path) -> Dict[str, str]:
    """Parse a simple .env file (KEY=VALUE per line, '#' comments, quotes stripped)."""
    env: Dict[str, str] = {}
    if dotenv_path.exists():
        with contextlib.suppress(OSError):
            for raw in dotenv_path.read_text(encoding="utf-8", errors="ignore").splitlines():
                s = raw.strip()
                if not s or s.startswith("#") or "=" not in s:
                    continue
                k, v = s.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k:
                    env[k] = v
    return env


def env_get(key: str) -> Optional[str]:
    """Get environment value from process env, falling back to .env in CWD."""
    v = os.getenv(key)
    if v is not None and v.strip():
        return v.strip()
    v2 = parse_dotenv(Path(".env")).get(key)
    return v2.strip() if v2 is not None and v2.strip() else None


def env_str(name: str, default: str) -> str:
    return env_get(name) or default


def api_base_url() -> str:
    return env_str("INSIGHTAXIS_URL", "http://localhost:8080").rstrip("/")


def log_level() -> str:
    return env_str("INSIGHTAXIS_LOG_LEVEL", "INFO").upper()


def events_table_limit() -> int:
    """Rows shown in the events table; the backend returns the most recent first."""
    try:
        return max(1, int(env_str("INSIGHTAXIS_EVENTS_LIMIT", "10")))
    except ValueError:
        return 10
