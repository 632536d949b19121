"""Bridge configuration."""

from pydantic import BaseModel, Field


DEFAULT_REQUIRED_COOKIES = [
    "X-APPLE-DS-WEB-SESSION-TOKEN",
    "X-APPLE-WEBAUTH-TOKEN",
    "X-APPLE-WEBAUTH-USER",
]


class BridgeConfig(BaseModel):
    """
    Bridge configuration.

    Secrets (admin token, Valkey URL) are not here - they come from Vault.
    """

    # Auth resolution
    required_cookies: list[str] = Field(
        default_factory=lambda: list(DEFAULT_REQUIRED_COOKIES),
        description="Upstream cookie names forwarded on every call",
        min_length=1,
    )
    direct_auth_header: str = Field(
        default="authentication",
        description="Header where alias-provider clients put their API key",
        min_length=1,
    )
    admin_token_header: str = Field(
        default="x-admin-token",
        description="Header carrying the admin shared secret",
        min_length=1,
    )

    # Storage
    credentials_key: str = Field(
        default="credentials",
        description="Valkey key holding the serialized credential list",
        min_length=1,
    )

    # Alias creation
    alias_label: str = Field(
        default="Generated by hme_bridge",
        description="Label set on every reserved alias",
    )
    default_note: str = Field(
        default="Generated by Bitwarden.",
        description="Note used when the caller supplies none",
    )
    fallback_mailbox: str = Field(
        default="forwarding-not-set@icloud.com",
        description="Mailbox reported when upstream has no forward address",
    )

    # Upstream
    upstream_timeout_seconds: float | None = Field(
        default=None,
        description="Per-call timeout for upstream requests (None: transport default)",
        gt=0,
    )
    expose_upstream_errors: bool = Field(
        default=False,
        description="Include upstream error payloads in API error messages",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )
