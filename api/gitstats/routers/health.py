"""Liveness endpoints. Neither touches GitHub."""

from datetime import datetime, timezone
from typing import Annotated

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from gitstats import config
from gitstats.services.periods import iso_utc

router = APIRouter()

HEALTH_VERSION = "1.0.0"
SERVICE_STARTED_AT = datetime.now(timezone.utc)


def _uptime_human(seconds: int) -> str:
    days, remainder = divmod(seconds, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, secs = divmod(remainder, 60)
    if days > 0:
        return f"{days}d {hours}h {minutes}m {secs}s"
    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


class HealthResponse(BaseModel):
    """GET /api/health response."""

    model_config = ConfigDict(extra="forbid")
    status: Annotated[str, Field(description="Always 'ok'")]
    version: Annotated[str, Field(description="Semver MAJOR.MINOR.PATCH")]
    timestamp: Annotated[str, Field(description="ISO8601 UTC")]
    uptime_seconds: Annotated[int, Field(description="Seconds since process start")]
    uptime_human: Annotated[str, Field(description="Human readable uptime")]
    github_api: Annotated[str, Field(description="Upstream base URL this instance aggregates")]


@router.get("/version")
async def version():
    return {"version": HEALTH_VERSION}


@router.get("/health", response_model=HealthResponse)
async def health():
    now = datetime.now(timezone.utc)
    uptime = max(0, int((now - SERVICE_STARTED_AT).total_seconds()))
    return HealthResponse(
        status="ok",
        version=HEALTH_VERSION,
        timestamp=iso_utc(now),
        uptime_seconds=uptime,
        uptime_human=_uptime_human(uptime),
        github_api=config.github_api_base_url(),
    )
