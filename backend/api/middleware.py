"""
API middleware stack.

- Request ID injection (X-Request-ID header), bound to every log entry of the request
- One structured access-log entry per request
- Exception handlers mapping failures to {"error": ...} bodies
- CORS configuration
"""
from __future__ import annotations

import time
import uuid

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from shared.config import get_settings
from shared.utils.http_client import UpstreamError
from shared.utils.logging import get_logger, request_context

from api.routes.matches import MissingParameter

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
UNLOGGED_PATHS = frozenset({"/health"})


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def _elapsed_ms(start: float) -> float:
    return round((time.monotonic() - start) * 1000, 2)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuses the caller's X-Request-ID or mints one, and echoes it on the response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:16]
        request.state.request_id = request_id

        with request_context(request_id):
            response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, grade/team and timing for each request."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in UNLOGGED_PATHS:
            return await call_next(request)

        start = time.monotonic()
        fields = {
            "method": request.method,
            "path": path,
            "grade_id": request.query_params.get("gradeId"),
            "team_id": request.query_params.get("teamId"),
        }
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error("http_request_error", **fields, duration_ms=_elapsed_ms(start), error=str(exc), exc_info=True)
            raise

        logger.info(
            "http_request",
            **fields,
            status=response.status_code,
            duration_ms=_elapsed_ms(start),
            client=request.client.host if request.client else "unknown",
        )
        return response


def setup_exception_handlers(app: FastAPI) -> None:
    """Every failure answers ``{"error": message}``."""

    @app.exception_handler(MissingParameter)
    async def missing_parameter_handler(request: Request, exc: MissingParameter) -> JSONResponse:
        logger.info("missing_parameter", parameter=exc.name, request_id=_request_id(request))
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(UpstreamError)
    async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
        # Only the matches-list fetch lets upstream failures reach here
        logger.error(
            "upstream_request_failed",
            path=request.url.path,
            error=str(exc),
            error_type=exc.__class__.__name__,
            request_id=_request_id(request),
        )
        return JSONResponse(status_code=500, content={"error": str(exc)})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            error=str(exc),
            request_id=_request_id(request),
            exc_info=True,
        )
        return JSONResponse(status_code=500, content={"error": str(exc)})


def setup_cors(app: FastAPI) -> None:
    settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=[REQUEST_ID_HEADER],
    )


def setup_middleware(app: FastAPI) -> None:
    """Apply all middleware to the FastAPI app; the last one added runs outermost."""
    # 1. Access log (inside the request-id context)
    app.add_middleware(RequestLoggingMiddleware)
    # 2. Request ID
    app.add_middleware(RequestIDMiddleware)
    # 3. CORS (outermost for preflight)
    setup_cors(app)
    setup_exception_handlers(app)
