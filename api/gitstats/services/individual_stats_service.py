"""Per-contributor commit, file, issue and pull-request statistics.

Three sequential phases per request:
1. list the contributor's commits (default branch first, whole repo as fallback)
2. fetch each commit's detail for line stats and touched files
3. scan repository issues and pull requests for the contributor's activity

Commit details are fetched on a bounded thread pool. The fold over details is
commutative, so completion order never changes the result.
"""

from __future__ import annotations

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Optional

from gitstats import config
from gitstats.models.stats import CommitPeriod, CommitStats
from gitstats.models.upstream import CommitDetail, IssueOrPR
from gitstats.services.decoders import decode_commit_detail, decode_issue_or_pr
from gitstats.services.github_client import GitHubClient
from gitstats.services.pagination import fetch_all_pages, listing
from gitstats.services.periods import iso_utc, period_since

TOP_FILES_CAP = 5
log = logging.getLogger(__name__)


@dataclass
class IssuePrCounts:
    issues_opened: int = 0
    issues_closed: int = 0
    prs_opened: int = 0
    prs_merged: int = 0
    prs_closed: int = 0


def fetch_default_branch(client: GitHubClient, owner: str, repo: str) -> Optional[str]:
    """Repository default branch, or None so commit listings are not branch-filtered."""
    node = client.get_repo(owner, repo)
    value = node.get("default_branch") if isinstance(node, dict) else None
    if not isinstance(value, str) or not value.strip():
        return None
    return value


def _list_commits(
    client: GitHubClient,
    owner: str,
    repo: str,
    login: str,
    since: Optional[datetime],
    branch: Optional[str],
) -> list[Any]:
    query: dict[str, Any] = {"author": login}
    if branch:
        query["sha"] = branch
    if since is not None:
        query["since"] = iso_utc(since)
    return fetch_all_pages(client, listing("/repos/{owner}/{repo}/commits", query, owner=owner, repo=repo))


def fetch_commits_for_contributor(
    client: GitHubClient,
    owner: str,
    repo: str,
    login: str,
    since: Optional[datetime],
    branch: Optional[str],
) -> list[Any]:
    commits = _list_commits(client, owner, repo, login, since, branch)
    if not commits and branch:
        log.info("individual_stats_branch_fallback repo=%s/%s login=%s branch=%s", owner, repo, login, branch)
        commits = _list_commits(client, owner, repo, login, since, None)
    return commits


def fetch_commit_details(
    client: GitHubClient,
    owner: str,
    repo: str,
    shas: list[str],
    max_workers: Optional[int] = None,
) -> list[CommitDetail]:
    """Fetch ``/commits/{sha}`` for every SHA; the first failure cancels the rest and is re-raised."""
    if not shas:
        return []
    workers = max(1, min(max_workers or config.detail_concurrency(), len(shas)))
    details: list[CommitDetail] = []
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="commit-detail") as pool:
        futures = [pool.submit(client.get_commit, owner, repo, sha) for sha in shas]
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)
        failed = [f for f in done if f.exception() is not None]
        if failed:
            client.cancel()
            for future in pending:
                future.cancel()
            raise failed[0].exception()
        for future in futures:
            node = future.result()
            if isinstance(node, dict):
                details.append(decode_commit_detail(node))
    return details


def count_languages(filenames: Iterable[str]) -> int:
    """Distinct lower-cased extensions; dotfiles and trailing dots do not count."""
    extensions: set[str] = set()
    for name in filenames:
        idx = name.rfind(".")
        if 0 < idx < len(name) - 1:
            extensions.add(name[idx + 1 :].lower())
    return len(extensions)


def _in_window(moment: Optional[datetime], since: Optional[datetime]) -> bool:
    if since is None:
        return True
    return moment is not None and moment >= since


def tally_issue_activity(records: Iterable[IssueOrPR], login: str, since: Optional[datetime]) -> IssuePrCounts:
    counts = IssuePrCounts()
    for record in records:
        if record.author_login != login:
            continue
        if record.is_pull_request:
            if _in_window(record.created_at, since):
                counts.prs_opened += 1
            if record.closed_at is not None and _in_window(record.closed_at, since):
                counts.prs_closed += 1
            if record.merged_at is not None and _in_window(record.merged_at, since):
                counts.prs_merged += 1
        else:
            if _in_window(record.created_at, since):
                counts.issues_opened += 1
            if record.closed_at is not None and _in_window(record.closed_at, since):
                counts.issues_closed += 1
    return counts


def collect_issue_and_pr_stats(
    client: GitHubClient,
    owner: str,
    repo: str,
    login: str,
    since: Optional[datetime],
) -> IssuePrCounts:
    issues = fetch_all_pages(
        client, listing("/repos/{owner}/{repo}/issues", {"state": "all"}, owner=owner, repo=repo)
    )
    pulls = fetch_all_pages(client, listing("/repos/{owner}/{repo}/pulls", {"state": "all"}, owner=owner, repo=repo))
    records: list[IssueOrPR] = []
    for node in issues:
        if not isinstance(node, dict):
            continue
        record = decode_issue_or_pr(node)
        # The issues listing also returns PRs; those are counted from /pulls instead.
        if not record.is_pull_request:
            records.append(record)
    records.extend(decode_issue_or_pr(node, from_pulls=True) for node in pulls if isinstance(node, dict))
    return tally_issue_activity(records, login, since)


def get_commit_stats(
    client: GitHubClient,
    owner: str,
    repo: str,
    login: str,
    period: CommitPeriod,
    now: Optional[datetime] = None,
) -> CommitStats:
    since = period_since(period, now)
    branch = fetch_default_branch(client, owner, repo)
    log.info(
        "individual_stats_start repo=%s/%s login=%s period=%s since=%s branch=%s",
        owner,
        repo,
        login,
        period.value,
        iso_utc(since) if since else "none",
        branch or "none",
    )

    commits = fetch_commits_for_contributor(client, owner, repo, login, since, branch)
    shas: list[str] = []
    for commit in commits:
        sha = commit.get("sha") if isinstance(commit, dict) else None
        if isinstance(sha, str) and sha.strip():
            shas.append(sha)
    log.info("individual_stats_commits repo=%s/%s login=%s count=%s", owner, repo, login, len(shas))

    details = fetch_commit_details(client, owner, repo, shas)
    commit_count = len(details)
    total_added = sum(d.additions for d in details if d.has_stats)
    total_deleted = sum(d.deletions for d in details if d.has_stats)
    files: set[str] = set()
    for detail in details:
        files.update(detail.filenames)

    activity = collect_issue_and_pr_stats(client, owner, repo, login, since)
    log.info(
        "individual_stats_activity repo=%s/%s login=%s issues_opened=%s issues_closed=%s "
        "prs_opened=%s prs_merged=%s prs_closed=%s",
        owner,
        repo,
        login,
        activity.issues_opened,
        activity.issues_closed,
        activity.prs_opened,
        activity.prs_merged,
        activity.prs_closed,
    )

    avg = (total_added + total_deleted) / commit_count if commit_count else 0.0
    return CommitStats(
        author_login=login,
        period=period,
        commit_count=commit_count,
        avg_commit_size_lines=avg,
        total_lines_added=total_added,
        total_lines_deleted=total_deleted,
        net_lines_changed=total_added - total_deleted,
        distinct_files_touched=len(files),
        top_files_modified_count=min(TOP_FILES_CAP, len(files)),
        main_languages_count=count_languages(files),
        issues_opened=activity.issues_opened,
        issues_closed=activity.issues_closed,
        prs_opened=activity.prs_opened,
        prs_merged=activity.prs_merged,
        prs_closed=activity.prs_closed,
    )
