"""Pydantic models."""

from gitstats.models.error import ErrorMessage
from gitstats.models.network import BranchInfo, CommitNode, NetworkGraph
from gitstats.models.repository import Contributor, LanguageStats, Repository, ViewerProfile
from gitstats.models.stats import (
    CommitPeriod,
    CommitStats,
    ContributionSlice,
    ContributionStats,
    WorkTypeStats,
)
from gitstats.models.timeline import (
    CommitTimeline,
    IssuesTimeline,
    IssuesTimelinePoint,
    PullRequestsTimeline,
    PullRequestsTimelinePoint,
    TimelinePeriod,
    TimelinePoint,
)

__all__ = [
    "BranchInfo",
    "CommitNode",
    "CommitPeriod",
    "CommitStats",
    "CommitTimeline",
    "ContributionSlice",
    "ContributionStats",
    "Contributor",
    "ErrorMessage",
    "IssuesTimeline",
    "IssuesTimelinePoint",
    "LanguageStats",
    "NetworkGraph",
    "PullRequestsTimeline",
    "PullRequestsTimelinePoint",
    "Repository",
    "TimelinePeriod",
    "TimelinePoint",
    "ViewerProfile",
    "WorkTypeStats",
]
