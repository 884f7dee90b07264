"""Error taxonomy surfaced by the statistics engine."""

from __future__ import annotations

from typing import Optional

UPSTREAM_KINDS = ("http", "transport", "timeout", "decode", "canceled")


class GitStatsError(Exception):
    """Base class for engine errors."""


class NoAuthorizedClient(GitStatsError):
    """No usable bearer token could be resolved for the current request."""


class UpstreamFailure(GitStatsError):
    """GitHub rejected the call, was unreachable, sent garbage, or the request was cancelled."""

    def __init__(self, message: str, status: Optional[int] = None, kind: str = "http") -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.kind = kind if kind in UPSTREAM_KINDS else "http"

    @property
    def is_auth_failure(self) -> bool:
        return self.status in (401, 403)

    def __repr__(self) -> str:
        return f"UpstreamFailure(kind={self.kind!r}, status={self.status!r}, message={self.message!r})"
