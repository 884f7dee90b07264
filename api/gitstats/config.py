"""Environment-driven settings.

Values are read at call time so tests (and long-running pods) pick up
changes to the environment without a restart.
"""

from __future__ import annotations

import os
from typing import Optional

DEFAULT_GITHUB_API_BASE_URL = "https://api.github.com"
DEFAULT_MAX_BODY_BYTES = 16 * 1024 * 1024
PAGE_SIZE = 100
DEFAULT_REQUEST_DEADLINE_SECONDS = 60.0
DISCONNECT_POLL_SECONDS = 0.5


def env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name, "1" if default else "").strip().lower()
    return raw in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float, minimum: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return max(minimum, float(raw))
    except ValueError:
        return default


def _env_int(name: str, default: int, minimum: int, maximum: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return max(minimum, min(maximum, int(raw)))
    except ValueError:
        return default


def github_api_base_url() -> str:
    raw = os.getenv("GITHUB_API_BASE_URL", "").strip()
    return (raw or DEFAULT_GITHUB_API_BASE_URL).rstrip("/")


def github_api_timeout_seconds() -> float:
    return _env_float("GITHUB_API_TIMEOUT_SECONDS", 20.0, minimum=1.0)


def github_user_agent() -> str:
    return os.getenv("GITHUB_USER_AGENT", "").strip() or "gitstats/1.0"


def max_body_bytes() -> int:
    return _env_int("GITSTATS_MAX_BODY_BYTES", DEFAULT_MAX_BODY_BYTES, DEFAULT_MAX_BODY_BYTES, 1 << 31)


def detail_concurrency() -> int:
    return _env_int("GITSTATS_DETAIL_CONCURRENCY", 8, 1, 32)


def request_deadline_seconds() -> Optional[float]:
    """Per-request budget for upstream calls; zero or a negative value disables the deadline."""
    raw = os.getenv("GITSTATS_REQUEST_DEADLINE_SECONDS", "").strip()
    if not raw:
        return DEFAULT_REQUEST_DEADLINE_SECONDS
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_REQUEST_DEADLINE_SECONDS
    return value if value > 0 else None


def allowed_origins() -> list[str]:
    raw = os.getenv("ALLOWED_ORIGINS", "http://localhost:5173")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def slow_request_ms_threshold() -> float:
    return _env_float("API_SLOW_REQUEST_MS", 1500.0, minimum=25.0)
