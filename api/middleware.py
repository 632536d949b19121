"""Request-scoped middleware for API requests."""

import logging
import time
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Assigns a request ID and logs one line per request."""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid4())
        request.state.request_id = request_id
        started = time.monotonic()
        client = request.client.host if request.client else "unknown"

        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (time.monotonic() - started) * 1000
            logger.error(
                f"{request.method} {request.url.path} from {client} "
                f"-> unhandled exception ({elapsed_ms:.0f}ms) [{request_id}]"
            )
            raise

        elapsed_ms = (time.monotonic() - started) * 1000
        logger.info(
            f"{request.method} {request.url.path} from {client} "
            f"-> {response.status_code} ({elapsed_ms:.0f}ms) [{request_id}]"
        )
        response.headers["X-Request-ID"] = request_id
        return response
