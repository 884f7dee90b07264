"""Decode raw GitHub JSON records into domain entities.

GitHub omits or nulls fields freely; every decoder here tolerates that and
falls back to empty values instead of raising.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from gitstats.models.repository import Contributor, Repository
from gitstats.models.upstream import BranchRef, CommitDetail, CommitHeader, IssueOrPR

REPO_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _obj(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


def _to_non_negative_int(value: Any) -> int:
    try:
        out = int(value)
    except (TypeError, ValueError):
        return 0
    return max(0, out)


def parse_github_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp with offset (``2024-05-01T10:00:00Z``). None when unusable."""
    if not isinstance(value, str) or not value.strip():
        return None
    raw = value.strip()
    if raw.endswith(("Z", "z")):
        raw = raw[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed


def decode_repository(node: dict) -> Repository:
    owner = node.get("owner")
    owner_login = owner.get("login") if isinstance(owner, dict) and owner.get("login") is not None else None
    updated_raw = _text(node.get("updated_at"))
    updated = parse_github_datetime(updated_raw)
    return Repository(
        name=_text(node.get("name")),
        full_name=_text(node.get("full_name")),
        html_url=_text(node.get("html_url")),
        description=_text(node.get("description")),
        is_private=bool(node.get("private", False)),
        owner_login=_text(owner_login) if owner_login is not None else None,
        updated_at=updated.strftime(REPO_TIMESTAMP_FORMAT) if updated else updated_raw,
    )


def decode_contributor(node: dict) -> Contributor:
    return Contributor(
        login=_text(node.get("login")),
        avatar_url=_text(node.get("avatar_url")),
        html_url=_text(node.get("html_url")),
        contributions=_to_non_negative_int(node.get("contributions")),
    )


def decode_branch(node: dict) -> BranchRef:
    return BranchRef(name=_text(node.get("name")), sha=_text(_obj(node.get("commit")).get("sha")))


def decode_commit_header(node: dict) -> CommitHeader:
    """Shallow record from a ``/commits`` listing."""
    commit = _obj(node.get("commit"))
    git_author = _obj(commit.get("author"))
    account = node.get("author")
    has_account = isinstance(account, dict)
    account = _obj(account)
    parents = node.get("parents")
    parent_shas = [_text(_obj(p).get("sha")) for p in parents] if isinstance(parents, list) else []
    return CommitHeader(
        sha=_text(node.get("sha")),
        message=_text(commit.get("message")),
        author_login=_text(account.get("login"), "Unknown") if has_account else None,
        author_avatar_url=_text(account.get("avatar_url")) if has_account else None,
        author_name=git_author.get("name") if isinstance(git_author.get("name"), str) else None,
        has_author_account=has_account,
        authored_at_raw=_text(git_author.get("date")),
        parent_shas=parent_shas,
    )


def decode_commit_detail(node: dict) -> CommitDetail:
    """Full record from ``/commits/{sha}``, carrying line stats and touched files."""
    stats = node.get("stats")
    has_stats = isinstance(stats, dict)
    stats = _obj(stats)
    files = node.get("files")
    filenames: list[str] = []
    if isinstance(files, list):
        for entry in files:
            name = _obj(entry).get("filename")
            if isinstance(name, str) and name.strip():
                filenames.append(name)
    return CommitDetail(
        sha=_text(node.get("sha")),
        has_stats=has_stats,
        additions=_to_non_negative_int(stats.get("additions")) if has_stats else 0,
        deletions=_to_non_negative_int(stats.get("deletions")) if has_stats else 0,
        filenames=filenames,
    )


def decode_issue_or_pr(node: dict, *, from_pulls: bool = False) -> IssueOrPR:
    """Record from ``/issues`` or ``/pulls``. Issues listings mark PRs with a ``pull_request`` key."""
    return IssueOrPR(
        author_login=_text(_obj(node.get("user")).get("login")),
        is_pull_request=from_pulls or node.get("pull_request") is not None,
        created_at=parse_github_datetime(node.get("created_at")),
        closed_at=parse_github_datetime(node.get("closed_at")),
        merged_at=parse_github_datetime(node.get("merged_at")),
    )
