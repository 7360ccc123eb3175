"""Middleware for the estimation API: CORS, request context, error handling.

Every request gets an ``X-Request-ID`` (taken from the client when present)
that is bound into the structlog context, so log lines emitted while the
estimator runs carry the id of the request that triggered them.
"""

from __future__ import annotations

import time
import uuid
from typing import Callable

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from neuro_primitives.config import get_settings

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
TIMING_HEADER = "X-Estimate-Duration-Ms"

_QUIET_PATHS = frozenset({"/health"})


def parse_origins(origins_raw: str) -> list[str]:
    """Split a comma-separated origin list; ``"*"`` allows all."""
    origins_raw = origins_raw.strip()
    if origins_raw == "*":
        return ["*"]
    return [o.strip() for o in origins_raw.split(",") if o.strip()]


def add_cors(app: FastAPI, origins_raw: str | None = None) -> None:
    origins = parse_origins(get_settings().cors_origins if origins_raw is None else origins_raw)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject credentialed wildcard responses
        allow_credentials=origins != ["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER, TIMING_HEADER],
    )


# ── Request context ───────────────────────────────────────────


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind a request id into the log context and time the request."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        structlog.contextvars.bind_contextvars(request_id=request_id)
        start = time.monotonic()
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")
        duration_ms = round((time.monotonic() - start) * 1000, 1)

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[TIMING_HEADER] = str(duration_ms)
        if request.url.path not in _QUIET_PATHS:
            logger.info(
                "http.request",
                request_id=request_id,
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration_ms=duration_ms,
            )
        return response


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Turn unhandled exceptions into a 500 that echoes the request id."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            request_id = request.headers.get(REQUEST_ID_HEADER)
            logger.exception("http.unhandled_error", path=request.url.path, error=str(exc))
            return JSONResponse(
                status_code=500,
                content={"detail": "Internal server error.", "request_id": request_id},
            )


def setup_middleware(app: FastAPI) -> None:
    """Install CORS, request context and the error handler (outermost last)."""
    add_cors(app)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)
