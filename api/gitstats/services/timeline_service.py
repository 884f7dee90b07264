"""Daily / weekly / monthly timelines of commits, issues and pull requests.

Every timeline is dense: the buckets for the whole window are seeded at zero,
oldest first, and events only ever increment an existing bucket. An event is
bucketed by its local date (the calendar date in its own UTC offset), and
anything dated before the window start is dropped, so week labels from a
previous year can never leak into the current window.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable, Optional

from gitstats.models.timeline import (
    CommitTimeline,
    IssuesTimeline,
    IssuesTimelinePoint,
    PullRequestsTimeline,
    PullRequestsTimelinePoint,
    TimelinePeriod,
    TimelinePoint,
)
from gitstats.services.decoders import decode_commit_header, decode_issue_or_pr, parse_github_datetime
from gitstats.services.github_client import GitHubClient
from gitstats.services.pagination import fetch_all_pages, listing
from gitstats.services.periods import iso_utc, shift_months

MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

EXPECTED_POINTS = {
    TimelinePeriod.DAY: 30,
    TimelinePeriod.WEEK: 12,
    TimelinePeriod.MONTH: 12,
}


def parse_timeline_period(value: Optional[str]) -> TimelinePeriod:
    """``day`` / ``week`` / ``month``; anything else is treated as ``day``."""
    try:
        return TimelinePeriod((value or "").strip().lower())
    except ValueError:
        return TimelinePeriod.DAY


def bucket_label(period: TimelinePeriod, day: date) -> str:
    if period == TimelinePeriod.WEEK:
        return f"W{day.isocalendar()[1]}"
    if period == TimelinePeriod.MONTH:
        return f"{MONTH_ABBR[day.month - 1]} {day.year}"
    return f"{MONTH_ABBR[day.month - 1]} {day.day}"


def _step_back(period: TimelinePeriod, today: date, steps: int) -> date:
    if period == TimelinePeriod.WEEK:
        return today - timedelta(weeks=steps)
    if period == TimelinePeriod.MONTH:
        return shift_months(today, -steps)
    return today - timedelta(days=steps)


@dataclass
class TimelineWindow:
    period: TimelinePeriod
    since: date
    labels: list[str]
    counters: dict[str, dict[str, int]] = field(default_factory=dict)

    @classmethod
    def build(cls, period: TimelinePeriod, now: Optional[datetime] = None) -> "TimelineWindow":
        today = (now or datetime.now(timezone.utc)).astimezone(timezone.utc).date()
        expected = EXPECTED_POINTS[period]
        since = _step_back(period, today, 30 if period == TimelinePeriod.DAY else 12)
        labels = [bucket_label(period, _step_back(period, today, i)) for i in range(expected - 1, -1, -1)]
        return cls(period=period, since=since, labels=labels)

    @property
    def since_param(self) -> str:
        return iso_utc(datetime.combine(self.since, time.min, tzinfo=timezone.utc))

    def series(self, name: str) -> dict[str, int]:
        if name not in self.counters:
            self.counters[name] = {label: 0 for label in self.labels}
        return self.counters[name]

    def add(self, name: str, moment: Optional[datetime]) -> bool:
        """Count ``moment`` into series ``name``; False when it falls outside the window."""
        if moment is None:
            return False
        day = moment.date()
        if day < self.since:
            return False
        counts = self.series(name)
        label = bucket_label(self.period, day)
        if label not in counts:
            return False
        counts[label] += 1
        return True

    def total(self, name: str) -> int:
        return sum(self.series(name).values())


def _dates(raw_values: Iterable[str]) -> Iterable[Optional[datetime]]:
    for raw in raw_values:
        yield parse_github_datetime(raw)


def get_commit_timeline(
    client: GitHubClient,
    owner: str,
    repo: str,
    period: TimelinePeriod,
    now: Optional[datetime] = None,
) -> CommitTimeline:
    window = TimelineWindow.build(period, now)
    commits = fetch_all_pages(
        client,
        listing("/repos/{owner}/{repo}/commits", {"since": window.since_param}, owner=owner, repo=repo),
    )
    counts = window.series("commits")
    for moment in _dates(decode_commit_header(c).authored_at_raw for c in commits if isinstance(c, dict)):
        window.add("commits", moment)

    return CommitTimeline(
        period=period,
        points=[TimelinePoint(label=label, count=counts[label]) for label in window.labels],
    )


def get_issues_timeline(
    client: GitHubClient,
    owner: str,
    repo: str,
    period: TimelinePeriod,
    now: Optional[datetime] = None,
) -> IssuesTimeline:
    window = TimelineWindow.build(period, now)
    opened = window.series("opened")
    closed = window.series("closed")

    for state in ("open", "closed"):
        # filter=all is the listing default for repository issues; sent for parity with the UI query.
        issues = fetch_all_pages(
            client,
            listing(
                "/repos/{owner}/{repo}/issues",
                {"state": state, "since": window.since_param, "filter": "all"},
                owner=owner,
                repo=repo,
            ),
        )
        for node in issues:
            if not isinstance(node, dict):
                continue
            issue = decode_issue_or_pr(node)
            if issue.is_pull_request:
                continue
            if state == "open":
                window.add("opened", issue.created_at)
            else:
                window.add("closed", issue.closed_at or issue.created_at)

    return IssuesTimeline(
        period=period,
        points=[
            IssuesTimelinePoint(label=label, opened=opened[label], closed=closed[label]) for label in window.labels
        ],
        total_open=window.total("opened"),
        total_closed=window.total("closed"),
    )


def get_pull_requests_timeline(
    client: GitHubClient,
    owner: str,
    repo: str,
    period: TimelinePeriod,
    now: Optional[datetime] = None,
) -> PullRequestsTimeline:
    window = TimelineWindow.build(period, now)
    opened = window.series("opened")
    merged = window.series("merged")

    open_prs = fetch_all_pages(client, listing("/repos/{owner}/{repo}/pulls", {"state": "open"}, owner=owner, repo=repo))
    for node in open_prs:
        if isinstance(node, dict):
            window.add("opened", decode_issue_or_pr(node, from_pulls=True).created_at)

    closed_prs = fetch_all_pages(
        client, listing("/repos/{owner}/{repo}/pulls", {"state": "closed"}, owner=owner, repo=repo)
    )
    for node in closed_prs:
        if isinstance(node, dict):
            window.add("merged", decode_issue_or_pr(node, from_pulls=True).merged_at)

    return PullRequestsTimeline(
        period=period,
        points=[
            PullRequestsTimelinePoint(label=label, opened=opened[label], merged=merged[label])
            for label in window.labels
        ],
        total_open=window.total("opened"),
        total_merged=window.total("merged"),
    )
