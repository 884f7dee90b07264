"""Per-contributor and per-period statistics."""

from __future__ import annotations

from enum import Enum

from gitstats.models.base import CamelModel


class CommitPeriod(str, Enum):
    ALL_TIME = "ALL_TIME"
    LAST_MONTH = "LAST_MONTH"
    LAST_WEEK = "LAST_WEEK"


class CommitStats(CamelModel):
    author_login: str
    period: CommitPeriod

    commit_count: int = 0
    avg_commit_size_lines: float = 0.0
    total_lines_added: int = 0
    total_lines_deleted: int = 0
    net_lines_changed: int = 0

    distinct_files_touched: int = 0
    top_files_modified_count: int = 0
    main_languages_count: int = 0

    issues_opened: int = 0
    issues_closed: int = 0

    prs_opened: int = 0
    prs_merged: int = 0
    prs_closed: int = 0


class ContributionSlice(CamelModel):
    login: str
    commit_count: int
    percent: float


class ContributionStats(CamelModel):
    owner: str
    repo: str
    period: CommitPeriod
    total_commits: int = 0
    slices: list[ContributionSlice] = []


class WorkTypeStats(CamelModel):
    owner: str
    repo: str
    period: CommitPeriod
    feature_commits: int = 0
    bugfix_commits: int = 0
    refactor_commits: int = 0
    test_commits: int = 0
    documentation_commits: int = 0
