"""
Request correlation and access logging.

Every request gets an id that is bound into the structlog context, so events
logged deeper down (``movement_recorded``, ``insufficient_stock``...) carry it
without the caller passing it along.
"""

import re
import time
import uuid
from collections.abc import Awaitable, Callable

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from stockledger.config import get_logger

logger = get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Client-supplied ids are echoed back, so keep them short and header-safe
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")


def resolve_request_id(request: Request) -> str:
    """Reuse the caller's correlation id when it is well formed."""
    incoming = request.headers.get(REQUEST_ID_HEADER, "")
    if _VALID_REQUEST_ID.match(incoming):
        return incoming
    return uuid.uuid4().hex[:8]


class LoggingMiddleware(BaseHTTPMiddleware):
    """Binds a request id and logs the start and completion of each request."""

    # Probes are polled constantly; keep them out of the info stream
    quiet_paths: tuple[str, ...] = ("/health",)

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        request_id = resolve_request_id(request)
        request.state.request_id = request_id
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        logger.debug("request_started", query=str(request.url.query) or None)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                error_type=type(e).__name__,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise
        else:
            duration_ms = (time.perf_counter() - started) * 1000
            if response.status_code >= 500:
                log = logger.error
            elif response.status_code >= 400:
                log = logger.warning
            elif request.url.path.startswith(self.quiet_paths):
                log = logger.debug
            else:
                log = logger.info
            log(
                "request_completed",
                status=response.status_code,
                duration_ms=round(duration_ms, 2),
                client=request.client.host if request.client else None,
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
            return response
        finally:
            structlog.contextvars.unbind_contextvars("request_id", "method", "path")
