"""SimpleLogin-compatible alias routes."""

import ipaddress

from fastapi import APIRouter, Request
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from core.exceptions import MalformedRequestError
from core.models.alias import CreateAliasRequest
from core.services.alias_service import AliasService


def _get_client_ip(request: Request) -> str | None:
    """Extract valid IP address from request, or None if invalid."""
    if not request.client:
        return None
    host = request.client.host
    try:
        ipaddress.ip_address(host)
        return host
    except ValueError:
        return None


async def _read_create_request(request: Request) -> CreateAliasRequest:
    """Parse the JSON body by hand so a bad body is a 400, not FastAPI's 422."""
    try:
        payload = await request.json()
    except ValueError:
        raise MalformedRequestError("Bad request")

    try:
        return CreateAliasRequest.model_validate(payload)
    except ValidationError:
        raise MalformedRequestError("Bad request")


def create_alias_router(alias_service: AliasService) -> APIRouter:
    """Create alias router with injected service."""
    router = APIRouter(tags=["alias"])

    @router.post("/alias/random/new")
    async def create_random_alias(request: Request):
        """Create a new iCloud alias.

        Auth is checked before the body is read. Store lookups and the
        upstream handshake are blocking and run in the threadpool.
        """
        ip_address = _get_client_ip(request)

        auth = await run_in_threadpool(alias_service.authenticate, request.headers, ip_address)
        body = await _read_create_request(request)
        alias = await run_in_threadpool(alias_service.create_alias, auth, body.note)

        return alias.model_dump(mode="json")

    return router
