"""
Credential service for the admin surface.

Every mutation reads the whole collection, changes it, and writes it back.
Concurrent admin writers can lose updates (last write wins).
"""

import json
import logging
import secrets

from auth.credential_store import CredentialStore
from auth.security_logger import SecurityEvent, SecurityLogger, redact_token
from auth.types import Credential, CredentialRequest
from core.exceptions import CredentialNotFoundError

logger = logging.getLogger(__name__)


def generate_token() -> str:
    """New bridge token: 16 random bytes, hex encoded."""
    return secrets.token_hex(16)


def serialize_cookie(cookie) -> str:
    """Compact JSON, the stored form of a credential's cookie pairs."""
    return json.dumps(cookie, separators=(",", ":"))


class CredentialService:
    """Service for credential administration."""

    def __init__(self, store: CredentialStore, security_logger: SecurityLogger | None = None):
        self.store = store
        self.security_logger = security_logger or SecurityLogger()

    def list_all(self) -> list[Credential]:
        """All stored credentials."""
        return self.store.get_all()

    def create(self, data: CredentialRequest) -> Credential:
        """
        Register a credential under a freshly generated token.

        Args:
            data: Label and cookie pairs (any JSON value; stored serialized)

        Returns:
            Created credential, including its token
        """
        credentials = self.store.get_all()
        existing = {c.token for c in credentials}

        token = generate_token()
        while token in existing:
            token = generate_token()

        credential = Credential(
            label=data.label,
            token=token,
            cookie=serialize_cookie(data.cookie),
        )
        credentials.append(credential)
        self.store.save_all(credentials)

        self.security_logger.log(
            SecurityEvent.CREDENTIAL_CREATED,
            details={"label": credential.label, "token": redact_token(token)},
        )
        return credential

    def update(self, token: str, data: CredentialRequest) -> Credential:
        """
        Replace label and cookie of an existing credential. Token is kept.

        Raises:
            CredentialNotFoundError: If no credential has this token.
        """
        credentials = self.store.get_all()

        for index, credential in enumerate(credentials):
            if credential.token == token:
                updated = Credential(
                    label=data.label,
                    token=token,
                    cookie=serialize_cookie(data.cookie),
                )
                credentials[index] = updated
                self.store.save_all(credentials)

                self.security_logger.log(
                    SecurityEvent.CREDENTIAL_UPDATED,
                    details={"label": updated.label, "token": redact_token(token)},
                )
                return updated

        raise CredentialNotFoundError("Token not found")

    def delete(self, token: str) -> None:
        """
        Remove a credential.

        Raises:
            CredentialNotFoundError: If no credential has this token.
        """
        credentials = self.store.get_all()
        remaining = [c for c in credentials if c.token != token]

        if len(remaining) == len(credentials):
            raise CredentialNotFoundError("Token not found")

        self.store.save_all(remaining)
        self.security_logger.log(
            SecurityEvent.CREDENTIAL_DELETED,
            details={"token": redact_token(token)},
        )
