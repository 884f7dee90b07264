"""Branch/commit network view. Commits point at parents by SHA only."""

from __future__ import annotations

from gitstats.models.base import CamelModel


class BranchInfo(CamelModel):
    name: str
    tip_sha: str
    is_default: bool


class CommitNode(CamelModel):
    sha: str
    short_sha: str
    message: str
    author_login: str
    author_avatar_url: str = ""
    date: str
    parent_shas: list[str] = []
    branches: list[str] = []


class NetworkGraph(CamelModel):
    branches: list[BranchInfo]
    commits: list[CommitNode]
    default_branch: str
