"""Map engine errors to HTTP status + JSON body.

- no principal on the request -> 401 "Please login first"
- NoAuthorizedClient, or GitHub answering 401/403 -> 401 "Please login again"
- any other UpstreamFailure -> 500 with an endpoint-specific message and the upstream detail
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from gitstats.services.errors import GitStatsError, NoAuthorizedClient, UpstreamFailure

LOGIN_FIRST = "Please login first"
LOGIN_AGAIN = "Please login again"
log = logging.getLogger(__name__)


class ApiError(Exception):
    """Rendered by the app's exception handler as ``{"message": ..., "detail": ...}``."""

    def __init__(self, status_code: int, message: str, detail: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.detail = detail

    def body(self) -> dict[str, str]:
        payload = {"message": self.message}
        if self.detail is not None:
            payload["detail"] = self.detail
        return payload


def missing_principal() -> ApiError:
    return ApiError(401, LOGIN_FIRST)


def translate_error(exc: GitStatsError, message: str) -> ApiError:
    if isinstance(exc, NoAuthorizedClient):
        return ApiError(401, LOGIN_AGAIN)
    if isinstance(exc, UpstreamFailure):
        if exc.is_auth_failure:
            return ApiError(401, LOGIN_AGAIN)
        return ApiError(500, message, exc.message)
    return ApiError(500, message, str(exc))


@contextmanager
def translated_errors(message: str) -> Iterator[None]:
    """Run an aggregation and re-raise engine errors as ``ApiError``."""
    try:
        yield
    except GitStatsError as exc:
        api_error = translate_error(exc, message)
        log.warning(
            "upstream_error status=%s message=%s kind=%s detail=%s",
            api_error.status_code,
            message,
            getattr(exc, "kind", "auth"),
            exc,
        )
        raise api_error from exc
