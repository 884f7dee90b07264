"""Tests for the GitHub API client.

Validates auth headers, path templating, error mapping, the body ceiling and
cancellation. Uses mocked HTTP responses (respx) to avoid real GitHub calls.
"""

import httpx
import pytest
import respx
from httpx import Response

from gitstats.services.errors import UpstreamFailure
from gitstats.services.github_client import GitHubClient


@respx.mock
def test_github_client_sends_bearer_and_media_type():
    route = respx.get("https://api.github.com/repos/owner/repo").mock(
        return_value=Response(200, json={"name": "repo", "full_name": "owner/repo"})
    )

    with GitHubClient("test-token-123") as client:
        data = client.get_repo("owner", "repo")

    assert data["full_name"] == "owner/repo"
    request = route.calls[0].request
    assert request.headers["authorization"] == "Bearer test-token-123"
    assert request.headers["accept"] == "application/vnd.github+json"
    assert "user-agent" in request.headers


@respx.mock
def test_github_client_quotes_path_variables_and_drops_none_params():
    route = respx.route(host="api.github.com").mock(return_value=Response(200, json=[]))

    with GitHubClient("t") as client:
        client.get_json(
            "/repos/{owner}/{repo}/commits",
            {"author": "alice", "sha": None},
            owner="my org",
            repo="repo",
        )

    url = route.calls[0].request.url
    assert url.raw_path.startswith(b"/repos/my%20org/repo/commits?")
    params = url.params
    assert params["author"] == "alice"
    assert "sha" not in params


def test_github_client_rejects_blank_token():
    with pytest.raises(ValueError):
        GitHubClient("   ")


@respx.mock
def test_github_client_maps_http_error_to_upstream_failure():
    respx.get("https://api.github.com/repos/owner/missing").mock(
        return_value=Response(404, json={"message": "Not Found"})
    )

    with GitHubClient("t") as client:
        with pytest.raises(UpstreamFailure) as exc_info:
            client.get_repo("owner", "missing")

    assert exc_info.value.status == 404
    assert exc_info.value.kind == "http"
    assert "Not Found" in exc_info.value.message
    assert not exc_info.value.is_auth_failure


@respx.mock
def test_github_client_flags_auth_failures():
    respx.get("https://api.github.com/user").mock(return_value=Response(401, json={"message": "Bad credentials"}))

    with GitHubClient("expired") as client:
        with pytest.raises(UpstreamFailure) as exc_info:
            client.get_user()

    assert exc_info.value.is_auth_failure


@respx.mock
def test_github_client_invalid_json_is_decode_failure():
    respx.get("https://api.github.com/repos/owner/repo").mock(return_value=Response(200, text="<html>oops</html>"))

    with GitHubClient("t") as client:
        with pytest.raises(UpstreamFailure) as exc_info:
            client.get_repo("owner", "repo")

    assert exc_info.value.kind == "decode"


@respx.mock
def test_github_client_enforces_body_ceiling():
    respx.get("https://api.github.com/repos/owner/repo/commits/abc").mock(
        return_value=Response(200, content=b'{"sha": "' + b"a" * 2048 + b'"}')
    )

    with GitHubClient("t", max_body_bytes=1024) as client:
        with pytest.raises(UpstreamFailure) as exc_info:
            client.get_commit("owner", "repo", "abc")

    assert exc_info.value.kind == "decode"
    assert "exceeds" in exc_info.value.message


@respx.mock
def test_github_client_transport_and_timeout_errors():
    respx.get("https://api.github.com/repos/owner/down").mock(side_effect=httpx.ConnectError("refused"))
    respx.get("https://api.github.com/repos/owner/slow").mock(side_effect=httpx.ReadTimeout("slow"))

    with GitHubClient("t") as client:
        with pytest.raises(UpstreamFailure) as down:
            client.get_repo("owner", "down")
        with pytest.raises(UpstreamFailure) as slow:
            client.get_repo("owner", "slow")

    assert down.value.kind == "transport"
    assert slow.value.kind == "timeout"


@respx.mock
def test_github_client_cancel_abandons_further_fetches():
    route = respx.get("https://api.github.com/repos/owner/repo").mock(return_value=Response(200, json={}))

    with GitHubClient("t") as client:
        client.cancel()
        with pytest.raises(UpstreamFailure) as exc_info:
            client.get_repo("owner", "repo")

    assert exc_info.value.kind == "canceled"
    assert not route.called


@respx.mock
def test_github_client_deadline_cancels():
    route = respx.get("https://api.github.com/repos/owner/repo").mock(return_value=Response(200, json={}))

    with GitHubClient("t", deadline_seconds=1e-9) as client:
        with pytest.raises(UpstreamFailure) as exc_info:
            client.get_repo("owner", "repo")

    assert exc_info.value.kind == "canceled"
    assert client.cancelled
    assert not route.called


@respx.mock
def test_github_client_uses_configured_base_url(monkeypatch):
    monkeypatch.setenv("GITHUB_API_BASE_URL", "https://ghe.example.com/api/v3/")
    route = respx.get("https://ghe.example.com/api/v3/user").mock(return_value=Response(200, json={"login": "a"}))

    with GitHubClient("t") as client:
        assert client.get_user() == {"login": "a"}

    assert route.called
