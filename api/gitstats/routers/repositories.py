"""Repository analytics routes (/api/repositories/...)."""

from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from typing import AsyncIterator, Optional

from fastapi import APIRouter, Depends, Header, Query, Request

from gitstats import config
from gitstats.models.error import ErrorMessage
from gitstats.models.network import NetworkGraph
from gitstats.models.repository import Contributor, LanguageStats, Repository
from gitstats.models.stats import CommitStats, ContributionStats, WorkTypeStats
from gitstats.models.timeline import CommitTimeline, IssuesTimeline, PullRequestsTimeline
from gitstats.services import (
    individual_stats_service,
    network_service,
    period_stats_service,
    repository_service,
    timeline_service,
)
from gitstats.services.credentials import has_principal, resolve_bearer
from gitstats.services.error_translator import ApiError, missing_principal, translate_error, translated_errors
from gitstats.services.errors import NoAuthorizedClient
from gitstats.services.github_client import GitHubClient
from gitstats.services.periods import PERIOD_SLUGS, parse_commit_period

router = APIRouter()

ERROR_RESPONSES = {401: {"model": ErrorMessage}, 500: {"model": ErrorMessage}}
log = logging.getLogger(__name__)


async def cancel_on_disconnect(request: Request, client: GitHubClient, poll_seconds: Optional[float] = None) -> None:
    """Cancel the client's outstanding fetches once the caller has gone away."""
    interval = config.DISCONNECT_POLL_SECONDS if poll_seconds is None else poll_seconds
    while not client.cancelled:
        if await request.is_disconnected():
            log.info("client_disconnected path=%s", request.url.path)
            client.cancel()
            return
        await asyncio.sleep(interval)


async def get_client(request: Request, authorization: Optional[str] = Header(None)) -> AsyncIterator[GitHubClient]:
    if not has_principal(authorization):
        raise missing_principal()
    try:
        token = resolve_bearer(authorization)
    except NoAuthorizedClient as exc:
        raise translate_error(exc, "") from exc
    with GitHubClient(token, deadline_seconds=config.request_deadline_seconds()) as client:
        watcher = asyncio.create_task(cancel_on_disconnect(request, client))
        try:
            yield client
        finally:
            watcher.cancel()
            with suppress(asyncio.CancelledError):
                await watcher


@router.get("/repositories", response_model=list[Repository], responses=ERROR_RESPONSES)
def list_repositories(client: GitHubClient = Depends(get_client)) -> list[Repository]:
    with translated_errors("Error loading repositories"):
        return repository_service.list_user_repositories(client)


@router.get("/repositories/{owner}/{repo}/contributors", response_model=list[Contributor], responses=ERROR_RESPONSES)
def list_contributors(owner: str, repo: str, client: GitHubClient = Depends(get_client)) -> list[Contributor]:
    with translated_errors("Error loading contributors"):
        return repository_service.list_contributors(client, owner, repo)


@router.get(
    "/repositories/{owner}/{repo}/contributors/{login}/commit-stats/{period}",
    response_model=CommitStats,
    responses={**ERROR_RESPONSES, 404: {"model": ErrorMessage}},
)
def commit_stats(
    owner: str,
    repo: str,
    login: str,
    period: str,
    client: GitHubClient = Depends(get_client),
) -> CommitStats:
    """Commit, file, issue and PR statistics for one contributor (all-time | last-month | last-week)."""
    commit_period = PERIOD_SLUGS.get(period)
    if commit_period is None:
        raise ApiError(404, "Unknown period")
    with translated_errors("Error loading commit stats"):
        return individual_stats_service.get_commit_stats(client, owner, repo, login, commit_period)


@router.get("/repositories/{owner}/{repo}/network", response_model=NetworkGraph, responses=ERROR_RESPONSES)
def network_graph(
    owner: str,
    repo: str,
    max_commits: int = Query(50, alias="maxCommits"),
    client: GitHubClient = Depends(get_client),
) -> NetworkGraph:
    with translated_errors("Error loading network graph"):
        return network_service.get_network_graph(client, owner, repo, max_commits)


@router.get("/repositories/{owner}/{repo}/languages", response_model=list[LanguageStats], responses=ERROR_RESPONSES)
def languages(owner: str, repo: str, client: GitHubClient = Depends(get_client)) -> list[LanguageStats]:
    with translated_errors("Error loading languages"):
        return repository_service.get_languages(client, owner, repo)


@router.get("/repositories/{owner}/{repo}/commit-timeline", response_model=CommitTimeline, responses=ERROR_RESPONSES)
def commit_timeline(
    owner: str,
    repo: str,
    period: str = Query("day", description="day | week | month; anything else means day."),
    client: GitHubClient = Depends(get_client),
) -> CommitTimeline:
    with translated_errors("Error loading commit timeline"):
        return timeline_service.get_commit_timeline(
            client, owner, repo, timeline_service.parse_timeline_period(period)
        )


@router.get("/repositories/{owner}/{repo}/issues-timeline", response_model=IssuesTimeline, responses=ERROR_RESPONSES)
def issues_timeline(
    owner: str,
    repo: str,
    period: str = Query("day", description="day | week | month; anything else means day."),
    client: GitHubClient = Depends(get_client),
) -> IssuesTimeline:
    with translated_errors("Error loading issues timeline"):
        return timeline_service.get_issues_timeline(
            client, owner, repo, timeline_service.parse_timeline_period(period)
        )


@router.get(
    "/repositories/{owner}/{repo}/pull-requests-timeline",
    response_model=PullRequestsTimeline,
    responses=ERROR_RESPONSES,
)
def pull_requests_timeline(
    owner: str,
    repo: str,
    period: str = Query("day", description="day | week | month; anything else means day."),
    client: GitHubClient = Depends(get_client),
) -> PullRequestsTimeline:
    with translated_errors("Error loading pull requests timeline"):
        return timeline_service.get_pull_requests_timeline(
            client, owner, repo, timeline_service.parse_timeline_period(period)
        )


@router.get(
    "/repositories/{owner}/{repo}/contribution-stats",
    response_model=ContributionStats,
    responses=ERROR_RESPONSES,
)
def contribution_stats(
    owner: str,
    repo: str,
    period: str = Query("ALL_TIME", description="ALL_TIME | LAST_MONTH | LAST_WEEK"),
    client: GitHubClient = Depends(get_client),
) -> ContributionStats:
    with translated_errors("Error loading contribution stats"):
        return period_stats_service.get_contribution_stats(client, owner, repo, parse_commit_period(period))


@router.get("/repositories/{owner}/{repo}/worktype-stats", response_model=WorkTypeStats, responses=ERROR_RESPONSES)
def work_type_stats(
    owner: str,
    repo: str,
    period: str = Query("ALL_TIME", description="ALL_TIME | LAST_MONTH | LAST_WEEK"),
    client: GitHubClient = Depends(get_client),
) -> WorkTypeStats:
    with translated_errors("Error loading work type stats"):
        return period_stats_service.get_work_type_stats(client, owner, repo, parse_commit_period(period))
