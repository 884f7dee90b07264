"""Commit periods (ALL_TIME / LAST_MONTH / LAST_WEEK) and their lower bounds."""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from gitstats.models.stats import CommitPeriod

PERIOD_SLUGS = {
    "all-time": CommitPeriod.ALL_TIME,
    "last-month": CommitPeriod.LAST_MONTH,
    "last-week": CommitPeriod.LAST_WEEK,
}


def parse_commit_period(value: Optional[str]) -> CommitPeriod:
    """Query-string form; anything unrecognised means ALL_TIME."""
    try:
        return CommitPeriod((value or "").strip())
    except ValueError:
        return CommitPeriod.ALL_TIME


def shift_months(day: date, months: int) -> date:
    """Move ``day`` by whole months, clamping to the last day of the target month."""
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    last = calendar.monthrange(year, month + 1)[1]
    return day.replace(year=year, month=month + 1, day=min(day.day, last))


def period_since(period: CommitPeriod, now: Optional[datetime] = None) -> Optional[datetime]:
    """Lower bound (UTC) for a period; None means no bound."""
    if period == CommitPeriod.ALL_TIME:
        return None
    current = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    if period == CommitPeriod.LAST_MONTH:
        shifted = shift_months(current.date(), -1)
        return current.replace(year=shifted.year, month=shifted.month, day=shifted.day)
    return current - timedelta(weeks=1)


def iso_utc(ts: datetime) -> str:
    return ts.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
