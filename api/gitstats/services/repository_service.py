"""Repository listing, contributors, language breakdown and the signed-in viewer."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType
from typing import Any

from gitstats.models.repository import Contributor, LanguageStats, Repository, ViewerProfile
from gitstats.services.decoders import decode_contributor, decode_repository
from gitstats.services.errors import UpstreamFailure
from gitstats.services.github_client import GitHubClient

DEFAULT_LANGUAGE_COLOR = "#8b8b8b"

# GitHub linguist colours for the languages people actually open this UI for.
LANGUAGE_COLORS = MappingProxyType(
    {
        "Java": "#b07219",
        "TypeScript": "#3178c6",
        "JavaScript": "#f1e05a",
        "Python": "#3572A5",
        "CSS": "#563d7c",
        "HTML": "#e34c26",
        "C": "#555555",
        "C++": "#f34b7d",
        "C#": "#178600",
        "Go": "#00ADD8",
        "Rust": "#dea584",
        "Ruby": "#701516",
        "PHP": "#4F5D95",
        "Swift": "#F05138",
        "Kotlin": "#A97BFF",
        "Scala": "#c22d40",
        "Shell": "#89e051",
        "Dockerfile": "#384d54",
        "SCSS": "#c6538c",
        "Vue": "#41b883",
    }
)


def language_color(language: str) -> str:
    return LANGUAGE_COLORS.get(language, DEFAULT_LANGUAGE_COLOR)


def _expect_list(data: Any, what: str) -> list:
    if data is None:
        return []
    if not isinstance(data, list):
        raise UpstreamFailure(f"expected a JSON array for {what}", kind="decode")
    return data


def get_viewer(client: GitHubClient) -> ViewerProfile:
    node = client.get_user()
    if not isinstance(node, dict):
        raise UpstreamFailure("expected a JSON object for the authenticated user", kind="decode")
    login = str(node.get("login") or "")
    return ViewerProfile(
        login=login,
        name=str(node.get("name") or login),
        avatar_url=node.get("avatar_url"),
    )


def list_user_repositories(client: GitHubClient) -> list[Repository]:
    """Caller's repositories, most recently updated first (first page of 100 only)."""
    data = client.get_json("/user/repos", {"sort": "updated", "per_page": 100})
    return [decode_repository(node) for node in _expect_list(data, "/user/repos") if isinstance(node, dict)]


def list_contributors(client: GitHubClient, owner: str, repo: str) -> list[Contributor]:
    data = client.get_json("/repos/{owner}/{repo}/contributors", owner=owner, repo=repo)
    return [decode_contributor(node) for node in _expect_list(data, "contributors") if isinstance(node, dict)]


def percent_of(part: int, total: int) -> float:
    tenths = (Decimal(part) * 1000 / Decimal(total)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return float(tenths / 10)


def get_languages(client: GitHubClient, owner: str, repo: str) -> list[LanguageStats]:
    data = client.get_json("/repos/{owner}/{repo}/languages", owner=owner, repo=repo)
    if data is None:
        return []
    if not isinstance(data, dict):
        raise UpstreamFailure("expected a JSON object for languages", kind="decode")

    entries: list[tuple[str, int]] = []
    for language, raw_bytes in data.items():
        try:
            size = max(0, int(raw_bytes))
        except (TypeError, ValueError):
            size = 0
        entries.append((str(language), size))

    total = sum(size for _, size in entries)
    if total == 0:
        return []

    entries.sort(key=lambda item: item[1], reverse=True)
    return [
        LanguageStats(
            language=language,
            bytes=size,
            percent=percent_of(size, total),
            color=language_color(language),
        )
        for language, size in entries
    ]
