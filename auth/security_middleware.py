"""Security middleware for FastAPI - admin token validation."""

import secrets

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from auth.security_logger import SecurityLogger, SecurityEvent
from api.base import error_response, ErrorCodes


class AdminAuthMiddleware(BaseHTTPMiddleware):
    """Middleware that gates the admin surface behind a shared secret.

    For admin routes:
    1. Reads the admin token header
    2. Compares it to the configured secret in constant time
    3. Rejects with 401 on mismatch

    Everything outside ADMIN_PREFIX passes through untouched; alias
    creation does its own per-user auth.
    """

    ADMIN_PREFIX = "/admin/"

    def __init__(
        self,
        app,
        admin_token: str,
        header_name: str = "x-admin-token",
        security_logger: SecurityLogger | None = None,
    ):
        super().__init__(app)
        if not admin_token:
            raise ValueError("admin_token is required")
        self._admin_token = admin_token
        self._header_name = header_name
        self._security_logger = security_logger or SecurityLogger()

    def _is_admin_path(self, path: str) -> bool:
        return path.startswith(self.ADMIN_PREFIX) or path == self.ADMIN_PREFIX.rstrip("/")

    async def dispatch(self, request: Request, call_next):
        """Process request through middleware."""
        if not self._is_admin_path(request.url.path):
            return await call_next(request)

        supplied = request.headers.get(self._header_name)

        if not supplied or not secrets.compare_digest(
            supplied.encode("utf-8"), self._admin_token.encode("utf-8")
        ):
            self._security_logger.log(
                SecurityEvent.ADMIN_DENIED,
                ip_address=request.client.host if request.client else None,
                user_agent=request.headers.get("user-agent"),
                details={"path": request.url.path, "header_present": supplied is not None},
            )
            return JSONResponse(
                status_code=401,
                content=error_response(
                    ErrorCodes.NOT_AUTHENTICATED,
                    "Unauthorized",
                    getattr(request.state, "request_id", None),
                ).model_dump(mode="json"),
            )

        return await call_next(request)
