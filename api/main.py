"""
api/main.py -- FastAPI application for the inventory backend.

Fronts the server-side items table so operators' clients (and the registry's
ItemsApiMirror) can register and list equipment over HTTP.

Run with:  uvicorn api.main:app --reload

Request path: request log -> SlowAPI rate limits -> CORS -> /items or /health.
The items table is opened by the lifespan and lives on app.state.table.

Every error leaves this app as {"error": {"code", "message", "detail"}}.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from api.limiter import limiter
from api.models import ErrorDetail, ErrorResponse, HealthResponse
from api.routes.items import router as items_router
from core.config import LOG_DATEFMT, LOG_FORMAT, get_settings
from inventory.table import RemoteTable

VERSION = "0.1.0"

settings = get_settings()
logging.basicConfig(level=settings.log_level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
logger = logging.getLogger("inventory.api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    table = RemoteTable(settings.table_db_url)
    app.state.table = table
    logger.info("Items table ready (%s)", table.engine.url.render_as_string(hide_password=True))
    try:
        yield
    finally:
        table.close()
        logger.info("Items table closed")


app = FastAPI(
    title="Inventory API",
    description="Equipment inventory for the municipal education network.",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
    max_age=3600,
)
app.add_middleware(SlowAPIMiddleware)
app.state.limiter = limiter

app.include_router(items_router, tags=["Items"])


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "%s %s -> %d in %.1fms",
        request.method,
        request.url.path,
        response.status_code,
        (time.perf_counter() - started) * 1000,
    )
    return response


# ---------------------------------------------------------------------------
# Error envelope
# ---------------------------------------------------------------------------


def _error(status_code: int, code: str, message: str, detail: Optional[str] = None) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, detail=detail))
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(RateLimitExceeded)
async def on_rate_limited(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    response = _error(429, "rate_limited", "Too many requests.", detail=str(exc))
    response.headers["Retry-After"] = str(int(getattr(exc, "retry_after", 60)))
    return response


@app.exception_handler(RequestValidationError)
async def on_invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
    """422 with the pydantic error list as detail (field locations, not values)."""
    problems = "; ".join(f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors())
    return _error(422, "validation_error", "Request validation failed.", detail=problems)


@app.exception_handler(HTTPException)
async def on_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    # Routes raise HTTPException(detail=ErrorDetail(...).model_dump()).
    if isinstance(exc.detail, dict):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})
    return _error(exc.status_code, f"http_{exc.status_code}", str(exc.detail))


@app.exception_handler(Exception)
async def on_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(500, "internal_error", "An unexpected error occurred.")


# Not rate limited: probes must always get an answer. Sync so ping() runs in the threadpool.
@app.get("/health", tags=["Health"])
def health(request: Request) -> HealthResponse:
    """Liveness plus items table reachability."""
    table: RemoteTable = request.app.state.table
    return HealthResponse(
        version=VERSION,
        components={"app": "ok", "database": "ok" if table.ping() else "error"},
    )
