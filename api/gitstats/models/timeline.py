"""Dense timelines: one point per bucket, oldest first, zero-filled."""

from __future__ import annotations

from enum import Enum

from gitstats.models.base import CamelModel


class TimelinePeriod(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class TimelinePoint(CamelModel):
    label: str
    count: int = 0


class IssuesTimelinePoint(CamelModel):
    label: str
    opened: int = 0
    closed: int = 0


class PullRequestsTimelinePoint(CamelModel):
    label: str
    opened: int = 0
    merged: int = 0


class CommitTimeline(CamelModel):
    period: TimelinePeriod
    points: list[TimelinePoint]


class IssuesTimeline(CamelModel):
    period: TimelinePeriod
    points: list[IssuesTimelinePoint]
    total_open: int = 0
    total_closed: int = 0


class PullRequestsTimeline(CamelModel):
    period: TimelinePeriod
    points: list[PullRequestsTimelinePoint]
    total_open: int = 0
    total_merged: int = 0
