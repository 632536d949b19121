"""Credential persistence in Valkey.

The whole credential list lives under one key. There are no partial updates:
callers read the full list, change it in memory, and write it back. Two
concurrent writers can lose an update (last write wins); nothing here guards
against that.
"""

import logging

from pydantic import TypeAdapter, ValidationError

from auth.types import Credential
from clients.valkey_client import ValkeyClient

logger = logging.getLogger(__name__)

_credential_list = TypeAdapter(list[Credential])


class CredentialStoreError(Exception):
    """Stored credential data is unreadable."""


class CredentialStore:
    """Full-collection read/write of bridge credentials."""

    def __init__(self, valkey: ValkeyClient, key: str = "credentials"):
        self._valkey = valkey
        self._key = key

    def get_all(self) -> list[Credential]:
        """
        Return every stored credential, in stored order.

        Empty list if nothing is stored yet (not an error).

        Raises:
            CredentialStoreError: If the stored value isn't a credential list.
        """
        try:
            data = self._valkey.get_json(self._key)
        except ValueError as e:
            raise CredentialStoreError(f"Credential data is not valid JSON: {e}")

        if data is None:
            return []

        try:
            return _credential_list.validate_python(data)
        except ValidationError as e:
            logger.error(f"Credential data under '{self._key}' failed validation: {e}")
            raise CredentialStoreError("Invalid credentials format")

    def save_all(self, credentials: list[Credential]) -> None:
        """
        Replace the stored collection.

        Raises:
            ValueError: If two credentials share a token.
        """
        tokens = [c.token for c in credentials]
        if len(tokens) != len(set(tokens)):
            raise ValueError("Credential tokens must be unique")

        self._valkey.set_json(self._key, [c.model_dump() for c in credentials])
        logger.info(f"Saved {len(credentials)} credentials")

    def find_by_token(self, token: str) -> Credential | None:
        """Exact-match lookup by bridge token."""
        for credential in self.get_all():
            if credential.token == token:
                return credential
        return None
