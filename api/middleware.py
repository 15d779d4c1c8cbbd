"""
Consolidated middleware for the NutriCoach API
"""

import time
import logging
from datetime import datetime, timezone
from uuid import uuid4
from decimal import Decimal

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.exceptions import ServiceError

logger = logging.getLogger("nutricoach.middleware")


# ============================================================================
# Helper Functions
# ============================================================================


def make_serializable(obj):
    """Convert objects to JSON-serializable format"""
    if isinstance(obj, Decimal):
        return float(obj)
    elif isinstance(obj, dict):
        return {k: make_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [make_serializable(item) for item in obj]
    elif isinstance(obj, Exception):
        return str(obj)
    return obj


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def error_body(error: dict) -> dict:
    return {"success": False, "error": error, "timestamp": _timestamp()}


def _first_message(errors: list) -> str:
    """Readable summary of the first validation error ("title is required")"""
    if not errors:
        return "Request validation failed"
    first = errors[0]
    msg = str(first.get("msg", "invalid value"))
    if msg.startswith("Value error, "):
        return msg[len("Value error, "):]
    loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "query", "path", "header")]
    return f"{'.'.join(loc)}: {msg}" if loc else msg


# ============================================================================
# Request Logging Middleware
# ============================================================================


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tags every request with an id and logs its outcome and duration"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid4())
        request.state.request_id = request_id
        route = f"{request.method} {request.url.path}"
        started = time.perf_counter()

        try:
            response: Response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.exception(
                f"request_failed id={request_id} route='{route}' elapsed_ms={elapsed_ms:.1f}"
            )
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        log = logger.warning if response.status_code >= 400 else logger.info
        log(
            f"request id={request_id} route='{route}' "
            f"status={response.status_code} elapsed_ms={elapsed_ms:.1f}"
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{elapsed_ms / 1000:.4f}"
        return response


# ============================================================================
# Error Handlers
# ============================================================================


def _where(request: Request) -> str:
    request_id = getattr(request.state, "request_id", "-")
    return f"id={request_id} route='{request.method} {request.url.path}'"


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle Pydantic validation errors; missing or malformed input is a 400"""
    errors = make_serializable(exc.errors())
    logger.warning(f"validation_error {_where(request)} errors={len(errors)}")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            {
                "code": "VALIDATION_ERROR",
                "message": _first_message(errors),
                "details": {"errors": errors},
            }
        ),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(f"http_error {_where(request)} status={exc.status_code} detail='{exc.detail}'")

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body({"code": f"HTTP_{exc.status_code}", "message": exc.detail}),
    )


async def service_exception_handler(request: Request, exc: ServiceError):
    """Handle every ServiceError subclass using its own status and code"""
    log = logger.error if exc.http_status >= 500 else logger.warning
    log(f"service_error {_where(request)} code={exc.code} message='{exc.message}'")

    return JSONResponse(
        status_code=exc.http_status,
        content=error_body(make_serializable(exc.to_dict())),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Unexpected errors are logged with a traceback and never leak their text"""
    logger.exception(f"unhandled_error {_where(request)} type={type(exc).__name__}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(
            {
                "code": "INTERNAL_SERVER_ERROR",
                "message": "An unexpected error occurred",
            }
        ),
    )
