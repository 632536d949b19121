"""Global exception handlers for FastAPI.

Every failure becomes a structured error response; nothing propagates to the
server as an unhandled crash.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from api.base import error_response, ErrorCodes
from auth.config import BridgeConfig
from auth.credential_store import CredentialStoreError
from auth.exceptions import AuthEmptyError, AuthMissingError, IncompleteCredentialError
from clients.icloud_client import (
    UpstreamDiscoveryError,
    UpstreamRejectedError,
    UpstreamTransportError,
)
from core.exceptions import AliasTranslationError, CredentialNotFoundError, MalformedRequestError

logger = logging.getLogger(__name__)


def _json_error(request: Request, status_code: int, code: str, message: str) -> JSONResponse:
    request_id = getattr(request.state, "request_id", None)
    return JSONResponse(
        status_code=status_code,
        content=error_response(code, message, request_id).model_dump(mode="json"),
    )


def register_error_handlers(app: FastAPI, config: BridgeConfig) -> None:
    """Register global exception handlers on the app."""

    def _upstream_message(summary: str, exc: Exception) -> str:
        if config.expose_upstream_errors:
            return f"{summary}: {exc}"
        return summary

    @app.exception_handler(AuthMissingError)
    async def auth_missing_handler(request: Request, exc: AuthMissingError):
        return _json_error(request, 401, ErrorCodes.NOT_AUTHENTICATED, str(exc))

    @app.exception_handler(AuthEmptyError)
    async def auth_empty_handler(request: Request, exc: AuthEmptyError):
        return _json_error(request, 401, ErrorCodes.AUTH_HEADER_EMPTY, str(exc))

    @app.exception_handler(IncompleteCredentialError)
    async def incomplete_credential_handler(request: Request, exc: IncompleteCredentialError):
        return _json_error(request, 500, ErrorCodes.INCOMPLETE_CREDENTIAL, str(exc))

    @app.exception_handler(MalformedRequestError)
    async def malformed_request_handler(request: Request, exc: MalformedRequestError):
        return _json_error(request, 400, ErrorCodes.INVALID_REQUEST, str(exc))

    @app.exception_handler(CredentialNotFoundError)
    async def not_found_handler(request: Request, exc: CredentialNotFoundError):
        return _json_error(request, 404, ErrorCodes.NOT_FOUND, str(exc))

    @app.exception_handler(UpstreamDiscoveryError)
    async def discovery_handler(request: Request, exc: UpstreamDiscoveryError):
        logger.error(f"Alias service unavailable for session: {exc}")
        return _json_error(
            request, 500, ErrorCodes.UPSTREAM_DISCOVERY_FAILED,
            _upstream_message("Alias service not available for this session", exc),
        )

    @app.exception_handler(UpstreamRejectedError)
    async def rejected_handler(request: Request, exc: UpstreamRejectedError):
        logger.error(f"Upstream rejected {exc.step}: {exc.error!r}")
        return _json_error(
            request, 500, ErrorCodes.UPSTREAM_REJECTED,
            _upstream_message(f"Upstream refused to {exc.step} alias", exc),
        )

    @app.exception_handler(UpstreamTransportError)
    async def transport_handler(request: Request, exc: UpstreamTransportError):
        logger.error(f"Upstream call failed: {exc}")
        return _json_error(
            request, 500, ErrorCodes.UPSTREAM_UNAVAILABLE,
            _upstream_message("Upstream request failed", exc),
        )

    @app.exception_handler(CredentialStoreError)
    async def store_error_handler(request: Request, exc: CredentialStoreError):
        logger.error(f"Credential store unreadable: {exc}")
        return _json_error(request, 500, ErrorCodes.INTERNAL_ERROR, "Invalid credentials format")

    @app.exception_handler(AliasTranslationError)
    async def translation_error_handler(request: Request, exc: AliasTranslationError):
        logger.error(f"Could not translate upstream alias: {exc}")
        return _json_error(request, 500, ErrorCodes.INTERNAL_ERROR, "An internal error occurred")

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _json_error(request, 422, ErrorCodes.VALIDATION_ERROR, str(exc.errors()))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return _json_error(request, 500, ErrorCodes.INTERNAL_ERROR, "An internal error occurred")
