"""Pytest configuration and fixtures.

Upstream GitHub is faked at the httpx transport layer with respx, so the real
``GitHubClient`` (headers, streaming, error mapping) runs in every test.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Optional

import httpx
import pytest
import respx

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from gitstats.services.github_client import GitHubClient  # noqa: E402

GITHUB_API = "https://api.github.com"


class FakeGitHub:
    """Path + query-param dispatcher standing in for api.github.com.

    ``match`` values must equal the request's query param; a ``None`` value
    requires the param to be absent. List payloads are sliced by
    ``page``/``per_page`` when the request carries ``page``.
    """

    def __init__(self) -> None:
        self._routes: list[tuple[str, dict[str, Any], Any, int]] = []
        self.calls: list[tuple[str, dict[str, str]]] = []

    def add(
        self,
        path: str,
        payload: Any = None,
        *,
        status: int = 200,
        match: Optional[dict[str, Any]] = None,
    ) -> "FakeGitHub":
        self._routes.append((path, match or {}, payload, status))
        return self

    @staticmethod
    def _matches(params: dict[str, str], match: dict[str, Any]) -> bool:
        for key, value in match.items():
            if value is None:
                if key in params:
                    return False
            elif params.get(key) != str(value):
                return False
        return True

    def handle(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        params = dict(request.url.params)
        self.calls.append((path, params))
        for route_path, match, payload, status in self._routes:
            if route_path != path or not self._matches(params, match):
                continue
            body = payload(params) if callable(payload) else payload
            if isinstance(body, list) and "page" in params:
                per_page = int(params.get("per_page", "30"))
                page = int(params["page"])
                body = body[(page - 1) * per_page : page * per_page]
            return httpx.Response(status, json=body)
        return httpx.Response(404, json={"message": "Not Found"})

    def calls_to(self, path: str) -> list[dict[str, str]]:
        return [params for call_path, params in self.calls if call_path == path]


@pytest.fixture
def fake_github():
    fake = FakeGitHub()
    with respx.mock(base_url=GITHUB_API, assert_all_called=False) as router:
        router.route().mock(side_effect=fake.handle)
        yield fake


@pytest.fixture
def gh_client(fake_github):
    with GitHubClient("test-token") as client:
        yield client
