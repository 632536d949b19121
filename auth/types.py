"""Pydantic models for auth domain."""

from typing import Any

from pydantic import BaseModel, Field


class CookiePair(BaseModel):
    """A single named upstream session cookie. Extra keys (domain, path, ...) are ignored."""

    name: str
    value: str


class Credential(BaseModel):
    """One user's registration, as persisted in the credential store."""

    label: str
    token: str = Field(..., description="Bridge token (opaque, unique)")
    cookie: str = Field(..., description="JSON array of {name, value} cookie pairs")


class CredentialRequest(BaseModel):
    """Admin payload for creating or updating a credential."""

    label: str = Field(..., min_length=1)
    cookie: Any = Field(..., description="Cookie pairs; stored serialized as JSON")


class ResolvedAuth(BaseModel):
    """Upstream session material resolved from one inbound request."""

    cookies: list[CookiePair]
    source: str = Field(..., description="Which resolver strategy produced this")

    @property
    def cookie_header(self) -> str:
        """Cookie header value: name=value pairs joined by '; '."""
        return "; ".join(f"{c.name}={c.value}" for c in self.cookies)

    def missing_cookies(self, required: list[str]) -> list[str]:
        """Required cookie names not present in this context."""
        present = {c.name for c in self.cookies}
        return [name for name in required if name not in present]
