"""Repository-level payloads: repositories, contributors, language breakdown."""

from __future__ import annotations

from typing import Optional

from gitstats.models.base import CamelModel


class Repository(CamelModel):
    name: str
    full_name: str
    html_url: str = ""
    description: str = ""
    is_private: bool = False
    owner_login: Optional[str] = None
    updated_at: str  # "yyyy-MM-dd HH:mm:ss" in the upstream offset


class Contributor(CamelModel):
    login: str
    avatar_url: str = ""
    html_url: str = ""
    contributions: int = 0


class LanguageStats(CamelModel):
    language: str
    bytes: int
    percent: float
    color: str


class ViewerProfile(CamelModel):
    """GET /api/me response for a signed-in user."""

    authenticated: bool = True
    login: str
    name: str
    avatar_url: Optional[str] = None
