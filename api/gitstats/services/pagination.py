"""Fetch-until-short-page loop shared by every paginated GitHub listing."""

from __future__ import annotations

from typing import Any, Callable, Optional

from gitstats.config import PAGE_SIZE
from gitstats.services.errors import UpstreamFailure
from gitstats.services.github_client import GitHubClient

# build_url(page) -> (path template, query params, path variables)
PageRequest = tuple[str, dict[str, Any], dict[str, Any]]


def listing(
    path: str,
    query: Optional[dict[str, Any]] = None,
    page_size: int = PAGE_SIZE,
    **path_vars: Any,
) -> Callable[[int], PageRequest]:
    """URL builder for the common ``?per_page=N&page=p`` listing shape."""
    base_query = dict(query or {})

    def build(page: int) -> PageRequest:
        return path, {**base_query, "per_page": page_size, "page": page}, path_vars

    return build


def fetch_all_pages(
    client: GitHubClient,
    build_url: Callable[[int], PageRequest],
    page_size: int = PAGE_SIZE,
) -> list[Any]:
    """Walk pages 1, 2, ... and concatenate them in upstream order.

    Stops on an empty page or one shorter than ``page_size``.
    """
    out: list[Any] = []
    page = 1
    while True:
        path, query, path_vars = build_url(page)
        data = client.get_json(path, query, **path_vars)
        if data is None:
            break
        if not isinstance(data, list):
            raise UpstreamFailure(f"expected a JSON array from {path} page {page}", kind="decode")
        out.extend(data)
        if len(data) < page_size:
            break
        page += 1
    return out
