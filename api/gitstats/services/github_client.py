"""GitHub API client.

Thin REST wrapper used by every aggregator:
- per-request bearer token auth (resolved by the caller)
- path templating + query string, GitHub JSON media type
- streamed bodies with a hard size ceiling (commit details get big)
- cooperative cancellation (event and/or monotonic deadline)

Pagination is the caller's job, see ``pagination.fetch_all_pages``.
"""

from __future__ import annotations

import json
import threading
import time
from typing import Any, Optional
from urllib.parse import quote

import httpx

from gitstats import config
from gitstats.services.errors import UpstreamFailure


class GitHubClient:
    def __init__(
        self,
        token: str,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        max_body_bytes: Optional[int] = None,
        deadline_seconds: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if not token or not token.strip():
            raise ValueError("bearer token must be resolved before calling GitHub")
        self._base_url = (base_url or config.github_api_base_url()).rstrip("/")
        self._max_body_bytes = max_body_bytes or config.max_body_bytes()
        self._cancel_event = threading.Event()
        self._deadline = time.monotonic() + deadline_seconds if deadline_seconds else None
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": user_agent or config.github_user_agent(),
            "X-GitHub-Api-Version": "2022-11-28",
            "Authorization": f"Bearer {token.strip()}",
        }
        self._client = httpx.Client(
            base_url=self._base_url,
            headers=headers,
            timeout=timeout or config.github_api_timeout_seconds(),
            transport=transport,
        )

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def cancel(self) -> None:
        """Abandon every fetch this client has not started yet."""
        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def _check_cancelled(self) -> None:
        if self._cancel_event.is_set():
            raise UpstreamFailure("request was cancelled", kind="canceled")
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._cancel_event.set()
            raise UpstreamFailure("request deadline exceeded", kind="canceled")

    @staticmethod
    def _render_path(path: str, path_vars: dict[str, Any]) -> str:
        if not path_vars:
            return path
        quoted = {key: quote(str(value), safe="") for key, value in path_vars.items()}
        try:
            return path.format(**quoted)
        except KeyError as exc:
            raise ValueError(f"missing path variable {exc} for {path}") from exc

    def _read_body(self, response: httpx.Response, url: str) -> bytes:
        declared = response.headers.get("Content-Length")
        if declared and declared.isdigit() and int(declared) > self._max_body_bytes:
            raise UpstreamFailure(
                f"GitHub response for {url} exceeds {self._max_body_bytes} bytes",
                status=response.status_code,
                kind="decode",
            )
        chunks: list[bytes] = []
        size = 0
        for chunk in response.iter_bytes():
            size += len(chunk)
            if size > self._max_body_bytes:
                raise UpstreamFailure(
                    f"GitHub response for {url} exceeds {self._max_body_bytes} bytes",
                    status=response.status_code,
                    kind="decode",
                )
            chunks.append(chunk)
        return b"".join(chunks)

    @staticmethod
    def _error_message(status: int, url: str, body: bytes) -> str:
        text = body.decode("utf-8", errors="replace")
        try:
            payload = json.loads(text)
        except ValueError:
            payload = None
        if isinstance(payload, dict) and isinstance(payload.get("message"), str):
            return f"GitHub API error {status} for {url}: {payload['message']}"
        return f"GitHub API error {status} for {url}: {text[:200]}"

    def get_json(self, path: str, query: Optional[dict[str, Any]] = None, **path_vars: Any) -> Any:
        """GET a path template like ``/repos/{owner}/{repo}`` and return the parsed JSON."""
        self._check_cancelled()
        url = self._render_path(path, path_vars)
        params = {key: value for key, value in (query or {}).items() if value is not None}
        try:
            with self._client.stream("GET", url, params=params) as response:
                body = self._read_body(response, url)
                status = response.status_code
        except httpx.TimeoutException as exc:
            raise UpstreamFailure(f"GitHub request timed out for {url}: {exc}", kind="timeout") from exc
        except httpx.HTTPError as exc:
            raise UpstreamFailure(f"GitHub request failed for {url}: {exc}", kind="transport") from exc

        if status >= 400:
            raise UpstreamFailure(self._error_message(status, url, body), status=status, kind="http")
        if not body.strip():
            return None
        try:
            return json.loads(body)
        except ValueError as exc:
            raise UpstreamFailure(f"GitHub returned invalid JSON for {url}", status=status, kind="decode") from exc

    def get_user(self) -> Any:
        return self.get_json("/user")

    def get_repo(self, owner: str, repo: str) -> Any:
        return self.get_json("/repos/{owner}/{repo}", owner=owner, repo=repo)

    def get_commit(self, owner: str, repo: str, sha: str) -> Any:
        return self.get_json("/repos/{owner}/{repo}/commits/{sha}", owner=owner, repo=repo, sha=sha)
