"""Security event logging for the auth audit trail.

Events go to the dedicated ``security`` logger so deployments can route them
separately. Tokens are never logged in full.
"""

import logging
from enum import Enum
from typing import Any


class SecurityEvent(Enum):
    """Auth security event types."""

    AUTH_RESOLVED = "auth_resolved"
    AUTH_MISSING = "auth_missing"
    AUTH_EMPTY = "auth_empty"
    CREDENTIAL_INCOMPLETE = "credential_incomplete"
    ADMIN_DENIED = "admin_denied"
    CREDENTIAL_CREATED = "credential_created"
    CREDENTIAL_UPDATED = "credential_updated"
    CREDENTIAL_DELETED = "credential_deleted"


def redact_token(token: str | None) -> str | None:
    """First four characters of a token, enough to correlate without leaking it."""
    if not token:
        return None
    return f"{token[:4]}..."


class SecurityLogger:
    """Append-only security event logger."""

    LOGGER_NAME = "security"

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger(self.LOGGER_NAME)

    def log(
        self,
        event: SecurityEvent,
        ip_address: str | None = None,
        user_agent: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Log security event. WARNING for denials, INFO otherwise."""
        level = logging.WARNING if event in _DENIAL_EVENTS else logging.INFO
        self._logger.log(
            level,
            f"{event.value} ip={ip_address} details={details or {}}",
            extra={
                "security_event": event.value,
                "ip_address": ip_address,
                "user_agent": user_agent,
                "details": details or {},
            },
        )


_DENIAL_EVENTS = {
    SecurityEvent.AUTH_MISSING,
    SecurityEvent.AUTH_EMPTY,
    SecurityEvent.CREDENTIAL_INCOMPLETE,
    SecurityEvent.ADMIN_DENIED,
}
