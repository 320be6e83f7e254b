"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.jobs.scheduler import register_jobs, scheduler
from app.routers import auth, communities, events, rides, tracks
from app.utils.errors import AppError, InvalidInputError
from app.utils.supabase_client import close_service_client

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start and stop scheduler with app lifecycle."""
    if settings.enable_scheduler:
        register_jobs()
        scheduler.start()
        logger.info("Scheduler started")
    yield
    if settings.enable_scheduler and scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
    close_service_client()


app = FastAPI(
    title=settings.app_name,
    description="Cycling communities, events, tracks and leaderboards",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(GZipMiddleware)


@app.middleware("http")
async def request_timing_middleware(request: Request, call_next):
    """Add per-request processing time and optionally log slow requests."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    response.headers["X-Process-Time-Ms"] = f"{elapsed_ms:.1f}"

    threshold_ms = settings.slow_request_log_threshold_ms
    if threshold_ms > 0 and elapsed_ms >= threshold_ms:
        logger.warning(
            "Slow request %s %s %.1fms",
            request.method,
            request.url.path,
            elapsed_ms,
        )

    return response


@app.exception_handler(AppError)
async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    """Convert domain exceptions into structured API responses."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    _: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Report the first validation failure in the InvalidInput shape."""
    errors = exc.errors()
    if not errors:
        api_error = InvalidInputError("Invalid request")
    else:
        first = errors[0]
        field = ".".join(
            str(part) for part in first.get("loc", ()) if part not in {"body", "query", "path"}
        )
        api_error = InvalidInputError(first.get("msg", "Invalid request"), field=field or None)
    return JSONResponse(status_code=api_error.status_code, content=api_error.to_dict())


@app.exception_handler(Exception)
async def unhandled_error_handler(_: Request, exc: Exception) -> JSONResponse:
    """Catch unexpected errors without leaking internals."""
    logger.exception("Unhandled exception", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "code": "INTERNAL_ERROR"},
    )


ROUTERS = (
    (auth.router, "/auth", "auth"),
    (communities.router, "/communities", "communities"),
    (events.router, "/events", "events"),
    (tracks.router, "/tracks", "tracks"),
    (rides.router, "/community-rides", "community-rides"),
)

for router, path, tag in ROUTERS:
    app.include_router(router, prefix=f"{settings.api_prefix.rstrip('/')}{path}", tags=[tag])


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint for deploys and uptime probes."""
    return {"status": "ok", "version": settings.app_version}
