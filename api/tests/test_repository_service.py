"""Tests for repositories, contributors, languages and the viewer profile."""

import pytest

from gitstats.services import repository_service
from gitstats.services.errors import UpstreamFailure


def test_languages_split_and_colors(fake_github, gh_client):
    fake_github.add("/repos/o/r/languages", {"Python": 100, "Java": 900})

    stats = repository_service.get_languages(gh_client, "o", "r")

    assert [s.model_dump(by_alias=True) for s in stats] == [
        {"language": "Java", "bytes": 900, "percent": 90.0, "color": "#b07219"},
        {"language": "Python", "bytes": 100, "percent": 10.0, "color": "#3572A5"},
    ]


def test_languages_unknown_language_gets_grey(fake_github, gh_client):
    fake_github.add("/repos/o/r/languages", {"Zig": 5})

    stats = repository_service.get_languages(gh_client, "o", "r")

    assert stats[0].color == repository_service.DEFAULT_LANGUAGE_COLOR == "#8b8b8b"
    assert stats[0].percent == 100.0


def test_languages_percentages_sum_close_to_hundred(fake_github, gh_client):
    fake_github.add("/repos/o/r/languages", {"A": 1, "B": 1, "C": 1, "D": 7, "E": 13})

    stats = repository_service.get_languages(gh_client, "o", "r")

    assert [s.bytes for s in stats] == sorted((s.bytes for s in stats), reverse=True)
    assert abs(100.0 - sum(s.percent for s in stats)) <= 0.1 * len(stats)


@pytest.mark.parametrize("payload", [{}, {"Python": 0}, None])
def test_languages_empty_when_no_bytes(fake_github, gh_client, payload):
    fake_github.add("/repos/o/r/languages", payload)

    assert repository_service.get_languages(gh_client, "o", "r") == []


@pytest.mark.parametrize("payload", [["Python"], "Python", 42])
def test_languages_non_object_body_is_decode_failure(fake_github, gh_client, payload):
    fake_github.add("/repos/o/r/languages", payload)

    with pytest.raises(UpstreamFailure) as exc_info:
        repository_service.get_languages(gh_client, "o", "r")

    assert exc_info.value.kind == "decode"


def test_percent_rounds_half_up():
    # 1/8 = 12.5% exactly; 1/16 = 6.25% -> 6.3
    assert repository_service.percent_of(1, 8) == 12.5
    assert repository_service.percent_of(1, 16) == 6.3


def test_list_user_repositories_queries_most_recent_first(fake_github, gh_client):
    fake_github.add(
        "/user/repos",
        [
            {
                "name": "a",
                "full_name": "me/a",
                "html_url": "https://github.com/me/a",
                "description": None,
                "private": False,
                "owner": {"login": "me"},
                "updated_at": "2024-06-01T08:00:00Z",
            }
        ],
    )

    repos = repository_service.list_user_repositories(gh_client)

    assert len(repos) == 1
    assert repos[0].updated_at == "2024-06-01 08:00:00"
    assert fake_github.calls_to("/user/repos") == [{"sort": "updated", "per_page": "100"}]


def test_list_contributors_keeps_upstream_order(fake_github, gh_client):
    fake_github.add(
        "/repos/o/r/contributors",
        [
            {"login": "zed", "avatar_url": "z", "html_url": "hz", "contributions": 3},
            {"login": "amy", "avatar_url": "a", "html_url": "ha", "contributions": 40},
        ],
    )

    contributors = repository_service.list_contributors(gh_client, "o", "r")

    assert [c.login for c in contributors] == ["zed", "amy"]
    assert contributors[1].contributions == 40


def test_list_contributors_propagates_upstream_errors(fake_github, gh_client):
    fake_github.add("/repos/o/r/contributors", {"message": "Server Error"}, status=500)

    with pytest.raises(UpstreamFailure) as exc_info:
        repository_service.list_contributors(gh_client, "o", "r")

    assert exc_info.value.status == 500


def test_get_viewer_defaults_name_to_login(fake_github, gh_client):
    fake_github.add("/user", {"login": "octo", "name": None, "avatar_url": "o.png"})

    viewer = repository_service.get_viewer(gh_client)

    assert viewer.model_dump(by_alias=True) == {
        "authenticated": True,
        "login": "octo",
        "name": "octo",
        "avatarUrl": "o.png",
    }
