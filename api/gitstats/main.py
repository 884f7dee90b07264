from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from gitstats import config
from gitstats.routers import health, repositories, session
from gitstats.services.error_translator import ApiError

app = FastAPI(title="gitstats API", version="1.0.0")
logger = logging.getLogger("gitstats.api")
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)
logger.propagate = False
logger.setLevel(logging.INFO)


def _build_route_signature(request: Request) -> tuple[str, str]:
    route = request.scope.get("route")
    route_path = str(getattr(route, "path", "") or "") if route is not None else ""
    raw_path = request.url.path
    return (route_path or raw_path), raw_path


def _correlation_id(request: Request) -> str:
    for key in ("x-request-id", "x-amzn-trace-id", "cf-ray"):
        value = request.headers.get(key)
        if value:
            return value
    return "none"


app.add_middleware(
    CORSMiddleware,
    allow_origins=config.allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.body())


@app.get("/", include_in_schema=False)
async def root():
    """Redirect to API documentation."""
    return RedirectResponse(url="/docs")


app.include_router(session.router, prefix="/api", tags=["session"])
app.include_router(repositories.router, prefix="/api", tags=["repositories"])
app.include_router(health.router, prefix="/api", tags=["health"])


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    status_code: int | None = None
    exc_name: str | None = None
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    except Exception as exc:
        status_code = 500
        exc_name = exc.__class__.__name__
        raise
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        status_code = status_code or 500
        if elapsed_ms >= config.slow_request_ms_threshold() or status_code >= 500 or config.env_flag(
            "API_LOG_ALL_REQUESTS", False
        ):
            request_path, raw_path = _build_route_signature(request)
            logger.warning(
                "api_request method=%s path=%s raw_path=%s status=%s elapsed_ms=%.2f correlation=%s exception=%s",
                request.method,
                request_path,
                raw_path,
                status_code,
                elapsed_ms,
                _correlation_id(request),
                exc_name or "none",
            )
