"""Application bootstrap.

Run with an ASGI server, e.g.::

    uvicorn main:create_app_from_vault --factory
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from api.admin import create_admin_router
from api.alias import create_alias_router
from api.errors import register_error_handlers
from api.middleware import RequestLoggingMiddleware
from auth.config import BridgeConfig
from auth.credential_store import CredentialStore
from auth.resolver import AuthResolver
from auth.security_logger import SecurityLogger
from auth.security_middleware import AdminAuthMiddleware
from clients.http_transport import HttpTransport, RequestsTransport
from clients.icloud_client import ICloudHmeClient
from clients.valkey_client import ValkeyClient
from clients.vault_client import get_admin_token, get_valkey_url
from core.services.alias_service import AliasService
from core.services.credential_service import CredentialService

logger = logging.getLogger(__name__)


def create_app(
    config: BridgeConfig,
    valkey: ValkeyClient,
    admin_token: str,
    transport: HttpTransport | None = None,
    lifespan=None,
) -> FastAPI:
    """Wire store, resolver, upstream client and routes into a FastAPI app."""
    if not admin_token:
        raise ValueError("admin_token is required")

    security_logger = SecurityLogger()
    store = CredentialStore(valkey, key=config.credentials_key)
    resolver = AuthResolver.default(store, config)
    hme_client = ICloudHmeClient(
        transport or RequestsTransport(timeout=config.upstream_timeout_seconds)
    )

    alias_service = AliasService(resolver, hme_client, config, security_logger)
    credential_service = CredentialService(store, security_logger)

    app = FastAPI(title="hme-bridge", lifespan=lifespan)
    app.add_middleware(
        AdminAuthMiddleware,
        admin_token=admin_token,
        header_name=config.admin_token_header,
        security_logger=security_logger,
    )
    app.add_middleware(RequestLoggingMiddleware)
    register_error_handlers(app, config)

    app.include_router(create_alias_router(alias_service), prefix="/api")
    app.include_router(create_admin_router(credential_service), prefix="/admin")

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


def create_app_from_vault(config: BridgeConfig | None = None) -> FastAPI:
    """Production entry point: secrets from Vault, fail fast if unreachable."""
    config = config or BridgeConfig()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    valkey = ValkeyClient(get_valkey_url())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        valkey.close()

    app = create_app(config, valkey, get_admin_token(), lifespan=lifespan)

    logger.info("hme-bridge started")
    return app
