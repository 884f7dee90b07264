"""Branch/commit network for the default branch, built from shallow REST listings."""

from __future__ import annotations

from typing import Any

from gitstats.models.network import BranchInfo, CommitNode, NetworkGraph
from gitstats.models.upstream import CommitHeader
from gitstats.services.decoders import decode_branch, decode_commit_header, parse_github_datetime
from gitstats.services.errors import UpstreamFailure
from gitstats.services.github_client import GitHubClient

FALLBACK_DEFAULT_BRANCH = "main"
MAX_NETWORK_COMMITS = 100
MAX_MESSAGE_LENGTH = 72
NODE_DATE_FORMAT = "%Y-%m-%d %H:%M"


def default_branch_of(repo_node: Any) -> str:
    if isinstance(repo_node, dict):
        value = repo_node.get("default_branch")
        if isinstance(value, str) and value.strip():
            return value
    return FALLBACK_DEFAULT_BRANCH


def short_sha(sha: str) -> str:
    return sha[:7] if len(sha) >= 7 else sha


def headline(message: str) -> str:
    """First line of a commit message, cut to 72 characters with a trailing ``...``."""
    line = message.split("\n", 1)[0].rstrip("\r")
    if len(line) > MAX_MESSAGE_LENGTH:
        return line[: MAX_MESSAGE_LENGTH - 3] + "..."
    return line


def node_date(raw: str) -> str:
    parsed = parse_github_datetime(raw)
    return parsed.strftime(NODE_DATE_FORMAT) if parsed else raw


def _commit_node(header: CommitHeader, sha_to_branches: dict[str, list[str]]) -> CommitNode:
    return CommitNode(
        sha=header.sha,
        short_sha=short_sha(header.sha),
        message=headline(header.message),
        author_login=header.display_author,
        author_avatar_url=(header.author_avatar_url or "") if header.has_author_account else "",
        date=node_date(header.authored_at_raw),
        parent_shas=list(header.parent_shas),
        branches=list(sha_to_branches.get(header.sha, [])),
    )


def get_network_graph(client: GitHubClient, owner: str, repo: str, max_commits: int = 50) -> NetworkGraph:
    default_branch = default_branch_of(client.get_repo(owner, repo))

    branch_nodes = client.get_json("/repos/{owner}/{repo}/branches", {"per_page": 100}, owner=owner, repo=repo)
    if branch_nodes is not None and not isinstance(branch_nodes, list):
        raise UpstreamFailure("expected a JSON array of branches", kind="decode")

    branches: list[BranchInfo] = []
    sha_to_branches: dict[str, list[str]] = {}
    for node in branch_nodes or []:
        if not isinstance(node, dict):
            continue
        ref = decode_branch(node)
        branches.append(BranchInfo(name=ref.name, tip_sha=ref.sha, is_default=ref.name == default_branch))
        sha_to_branches.setdefault(ref.sha, []).append(ref.name)

    per_page = max(1, min(max_commits, MAX_NETWORK_COMMITS))
    commit_nodes = client.get_json(
        "/repos/{owner}/{repo}/commits",
        {"sha": default_branch, "per_page": per_page},
        owner=owner,
        repo=repo,
    )
    if commit_nodes is not None and not isinstance(commit_nodes, list):
        raise UpstreamFailure("expected a JSON array of commits", kind="decode")

    commits = [
        _commit_node(decode_commit_header(node), sha_to_branches)
        for node in commit_nodes or []
        if isinstance(node, dict)
    ]
    return NetworkGraph(branches=branches, commits=commits, default_branch=default_branch)
