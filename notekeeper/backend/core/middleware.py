"""
Request Context Middleware.

Tags every request with an id and the calling frontend, binds both to
structlog so handler logs carry them, and reports timing.

Headers read:    X-Request-ID (optional), X-Frontend-ID (web, cli, api, internal)
Headers written: X-Request-ID, X-Response-Time ("<n>ms")
"""

import uuid
from datetime import datetime

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from notekeeper.backend.core.logging import get_logger
from notekeeper.backend.core.utils import utc_now

logger = get_logger(__name__)

# Subset of VALID_SOURCES in logging.py that a client may claim
KNOWN_FRONTENDS = {"web", "cli", "api", "internal"}


def _frontend(request: Request) -> str:
    frontend = request.headers.get("X-Frontend-ID", "unknown").lower()
    return frontend if frontend in KNOWN_FRONTENDS else "unknown"


def _elapsed_ms(start: datetime) -> int:
    return int((utc_now() - start).total_seconds() * 1000)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Request id, frontend and timing for every request.

    Handlers can read request.state.request_id, .frontend and .start_time.
    Completed requests are logged at INFO when `log_requests` is set
    (features.api_request_logging), otherwise at DEBUG.
    """

    def __init__(self, app: ASGIApp, log_requests: bool = False) -> None:
        super().__init__(app)
        self.log_requests = log_requests

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        frontend = _frontend(request)
        start_time = utc_now()

        request.state.request_id = request_id
        request.state.frontend = frontend
        request.state.start_time = start_time

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            frontend=frontend,
            method=request.method,
            path=request.url.path,
        )
        logger.debug(
            "Request started",
            extra={
                "client_host": request.client.host if request.client else None,
                "user_agent": request.headers.get("User-Agent"),
            },
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            # The registered exception handlers build the response
            logger.error(
                "Request failed with exception",
                extra={"duration_ms": _elapsed_ms(start_time), "error_type": type(exc).__name__},
            )
            raise
        else:
            duration_ms = _elapsed_ms(start_time)
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms}ms"

            log = logger.info if self.log_requests else logger.debug
            log(
                "Request completed",
                extra={"status_code": response.status_code, "duration_ms": duration_ms},
            )
            return response
        finally:
            structlog.contextvars.clear_contextvars()
