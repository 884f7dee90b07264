"""Period-level rollups over the repository's commit listing: who committed, and what kind of work."""

from __future__ import annotations

import re
from collections import Counter
from datetime import datetime
from typing import Any, Optional

from gitstats.models.stats import CommitPeriod, ContributionSlice, ContributionStats, WorkTypeStats
from gitstats.models.upstream import CommitHeader
from gitstats.services.decoders import decode_commit_header
from gitstats.services.github_client import GitHubClient
from gitstats.services.pagination import fetch_all_pages, listing
from gitstats.services.periods import iso_utc, period_since
from gitstats.services.repository_service import percent_of

# Checked in order; the first category with a keyword at the start of a word wins.
WORK_TYPE_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("bugfix", ("fix", "bug", "hotfix", "patch")),
    ("test", ("test", "spec")),
    ("docs", ("doc", "docs", "readme")),
    ("refactor", ("refactor", "cleanup")),
)
DEFAULT_WORK_TYPE = "feature"

_WORK_TYPE_PATTERNS = tuple(
    (category, re.compile(r"\b(?:" + "|".join(re.escape(k) for k in keywords) + r")"))
    for category, keywords in WORK_TYPE_KEYWORDS
)


def classify_work_type(message: str) -> str:
    first_line = message.split("\n", 1)[0].lower()
    for category, pattern in _WORK_TYPE_PATTERNS:
        if pattern.search(first_line):
            return category
    return DEFAULT_WORK_TYPE


def fetch_period_commits(
    client: GitHubClient,
    owner: str,
    repo: str,
    period: CommitPeriod,
    now: Optional[datetime] = None,
) -> list[CommitHeader]:
    since = period_since(period, now)
    query: dict[str, Any] = {}
    if since is not None:
        query["since"] = iso_utc(since)
    nodes = fetch_all_pages(client, listing("/repos/{owner}/{repo}/commits", query, owner=owner, repo=repo))
    return [decode_commit_header(node) for node in nodes if isinstance(node, dict)]


def get_contribution_stats(
    client: GitHubClient,
    owner: str,
    repo: str,
    period: CommitPeriod,
    now: Optional[datetime] = None,
) -> ContributionStats:
    commits = fetch_period_commits(client, owner, repo, period, now)
    by_author = Counter(commit.display_author for commit in commits)
    total = sum(by_author.values())
    ranked = sorted(by_author.items(), key=lambda item: (-item[1], item[0]))
    return ContributionStats(
        owner=owner,
        repo=repo,
        period=period,
        total_commits=total,
        slices=[
            ContributionSlice(login=login, commit_count=count, percent=percent_of(count, total))
            for login, count in ranked
        ],
    )


def get_work_type_stats(
    client: GitHubClient,
    owner: str,
    repo: str,
    period: CommitPeriod,
    now: Optional[datetime] = None,
) -> WorkTypeStats:
    commits = fetch_period_commits(client, owner, repo, period, now)
    counts = Counter(classify_work_type(commit.message) for commit in commits)
    return WorkTypeStats(
        owner=owner,
        repo=repo,
        period=period,
        feature_commits=counts["feature"],
        bugfix_commits=counts["bugfix"],
        refactor_commits=counts["refactor"],
        test_commits=counts["test"],
        documentation_commits=counts["docs"],
    )
