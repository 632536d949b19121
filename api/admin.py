"""Credential administration routes. Guarded by AdminAuthMiddleware."""

from fastapi import APIRouter, Request
from starlette.concurrency import run_in_threadpool

from api.base import success_response
from auth.types import CredentialRequest
from core.services.credential_service import CredentialService


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def create_admin_router(credential_service: CredentialService) -> APIRouter:
    """Create admin router with injected service."""
    router = APIRouter(tags=["admin"])

    @router.get("/credentials")
    async def list_credentials(request: Request):
        credentials = await run_in_threadpool(credential_service.list_all)
        return success_response(
            [c.model_dump() for c in credentials], _request_id(request)
        ).model_dump(mode="json")

    @router.post("/credentials")
    async def create_credential(request: Request, body: CredentialRequest):
        """Register a credential; the response carries its new bridge token."""
        credential = await run_in_threadpool(credential_service.create, body)
        return success_response(credential.model_dump(), _request_id(request)).model_dump(mode="json")

    @router.put("/credentials/{token}")
    async def update_credential(request: Request, token: str, body: CredentialRequest):
        credential = await run_in_threadpool(credential_service.update, token, body)
        return success_response(credential.model_dump(), _request_id(request)).model_dump(mode="json")

    @router.delete("/credentials/{token}")
    async def delete_credential(request: Request, token: str):
        await run_in_threadpool(credential_service.delete, token)
        return success_response(
            {"message": "Credential deleted"}, _request_id(request)
        ).model_dump(mode="json")

    return router
