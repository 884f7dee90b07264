"""Tests for environment-driven settings and commit periods."""

from datetime import date, datetime, timezone

import pytest

from gitstats import config
from gitstats.models.stats import CommitPeriod
from gitstats.services.periods import PERIOD_SLUGS, iso_utc, parse_commit_period, period_since, shift_months


def test_defaults(monkeypatch):
    for name in (
        "GITHUB_API_BASE_URL",
        "GITSTATS_DETAIL_CONCURRENCY",
        "GITSTATS_REQUEST_DEADLINE_SECONDS",
        "ALLOWED_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)

    assert config.github_api_base_url() == "https://api.github.com"
    assert config.detail_concurrency() == 8
    assert config.request_deadline_seconds() == 60.0
    assert config.allowed_origins() == ["http://localhost:5173"]
    assert config.max_body_bytes() >= 16 * 1024 * 1024


@pytest.mark.parametrize("raw, expected", [("4", 4), ("0", 1), ("500", 32), ("many", 8)])
def test_detail_concurrency_is_clamped(monkeypatch, raw, expected):
    monkeypatch.setenv("GITSTATS_DETAIL_CONCURRENCY", raw)
    assert config.detail_concurrency() == expected


@pytest.mark.parametrize("raw, expected", [("30", 30.0), ("0", None), ("-1", None), ("soon", 60.0)])
def test_request_deadline(monkeypatch, raw, expected):
    monkeypatch.setenv("GITSTATS_REQUEST_DEADLINE_SECONDS", raw)
    assert config.request_deadline_seconds() == expected


def test_allowed_origins_comma_list(monkeypatch):
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example, https://b.example,,")
    assert config.allowed_origins() == ["https://a.example", "https://b.example"]


def test_env_flag(monkeypatch):
    monkeypatch.setenv("API_LOG_ALL_REQUESTS", "yes")
    assert config.env_flag("API_LOG_ALL_REQUESTS")
    monkeypatch.setenv("API_LOG_ALL_REQUESTS", "0")
    assert not config.env_flag("API_LOG_ALL_REQUESTS")


def test_period_slugs_cover_every_period():
    assert set(PERIOD_SLUGS.values()) == set(CommitPeriod)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("LAST_WEEK", CommitPeriod.LAST_WEEK),
        ("LAST_MONTH", CommitPeriod.LAST_MONTH),
        ("last_week", CommitPeriod.ALL_TIME),
        ("", CommitPeriod.ALL_TIME),
        (None, CommitPeriod.ALL_TIME),
    ],
)
def test_parse_commit_period(raw, expected):
    assert parse_commit_period(raw) == expected


def test_period_since():
    now = datetime(2026, 3, 31, 9, 30, tzinfo=timezone.utc)

    assert period_since(CommitPeriod.ALL_TIME, now) is None
    assert iso_utc(period_since(CommitPeriod.LAST_WEEK, now)) == "2026-03-24T09:30:00Z"
    # Feb has no 31st; clamps to the end of the month
    assert iso_utc(period_since(CommitPeriod.LAST_MONTH, now)) == "2026-02-28T09:30:00Z"


def test_shift_months_across_years():
    assert shift_months(date(2026, 1, 15), -1) == date(2025, 12, 15)
    assert shift_months(date(2025, 3, 15), 12) == date(2026, 3, 15)
    assert shift_months(date(2024, 3, 31), -1) == date(2024, 2, 29)
