"""Signed-in user check used by the SPA on load."""

from __future__ import annotations

from typing import Optional, Union

from fastapi import APIRouter, Header
from fastapi.responses import JSONResponse

from gitstats import config
from gitstats.models.repository import ViewerProfile
from gitstats.services import repository_service
from gitstats.services.credentials import resolve_bearer
from gitstats.services.error_translator import translate_error
from gitstats.services.errors import NoAuthorizedClient, UpstreamFailure
from gitstats.services.github_client import GitHubClient

router = APIRouter()


def _unauthenticated() -> JSONResponse:
    return JSONResponse(status_code=401, content={"authenticated": False})


@router.get("/me", response_model=ViewerProfile, responses={401: {"description": '{"authenticated": false}'}})
def me(authorization: Optional[str] = Header(None)) -> Union[ViewerProfile, JSONResponse]:
    try:
        token = resolve_bearer(authorization)
    except NoAuthorizedClient:
        return _unauthenticated()
    with GitHubClient(token, deadline_seconds=config.request_deadline_seconds()) as client:
        try:
            return repository_service.get_viewer(client)
        except UpstreamFailure as exc:
            if exc.is_auth_failure:
                return _unauthenticated()
            raise translate_error(exc, "Error loading user") from exc
