"""Records decoded from raw GitHub JSON, before aggregation.

These never leave the service; field names follow the upstream API.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class BranchRef(_Record):
    name: str
    sha: str


class CommitHeader(_Record):
    sha: str
    message: str = ""
    author_login: Optional[str] = None
    author_avatar_url: Optional[str] = None
    author_name: Optional[str] = None
    has_author_account: bool = False
    authored_at_raw: str = ""
    parent_shas: list[str] = []

    @property
    def display_author(self) -> str:
        if self.has_author_account:
            return self.author_login or "Unknown"
        return self.author_name or "Unknown"


class CommitDetail(_Record):
    sha: str
    has_stats: bool = False
    additions: int = 0
    deletions: int = 0
    filenames: list[str] = []


class IssueOrPR(_Record):
    author_login: str = ""
    is_pull_request: bool = False
    created_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    merged_at: Optional[datetime] = None
