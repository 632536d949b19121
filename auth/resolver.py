"""Resolve an inbound request's auth headers into upstream session cookies.

Sources are tried in a fixed order and the first one that applies wins:

1. ``Authorization: Bearer <token>`` looked up in the credential store.
   Unknown tokens, unparseable stored cookies and an unreadable store all
   fall through silently.
2. The direct auth header (Bitwarden puts the SimpleLogin API key here).
   Its value is parsed as a JSON cookie array first, then treated as a
   bridge token. An empty value fails immediately.

Each source is a strategy returning ``ResolvedAuth`` or ``None`` when it
doesn't apply.
"""

import logging
from typing import Mapping, Protocol

import redis
from pydantic import ValidationError

from auth.config import BridgeConfig
from auth.cookies import filter_required, parse_cookie_pairs
from auth.credential_store import CredentialStore, CredentialStoreError
from auth.exceptions import AuthEmptyError, AuthMissingError
from auth.types import ResolvedAuth

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class AuthStrategy(Protocol):
    name: str

    def resolve(self, headers: Mapping[str, str]) -> ResolvedAuth | None: ...


def _from_stored_token(
    store: CredentialStore,
    token: str,
    required: list[str],
    source: str,
) -> ResolvedAuth | None:
    """Look up token and build a context from its stored cookies, or None."""
    credential = store.find_by_token(token)
    if credential is None:
        return None

    try:
        pairs = parse_cookie_pairs(credential.cookie)
    except ValidationError:
        logger.warning(f"Stored cookie for credential '{credential.label}' is not a cookie list")
        return None

    return ResolvedAuth(cookies=filter_required(pairs, required), source=source)


class BearerTokenStrategy:
    """Authorization: Bearer <bridge token>."""

    name = "bearer"

    def __init__(self, store: CredentialStore, required: list[str]):
        self._store = store
        self._required = required

    def resolve(self, headers: Mapping[str, str]) -> ResolvedAuth | None:
        value = headers.get("authorization")
        if value is None or not value.startswith(BEARER_PREFIX):
            return None

        token = value[len(BEARER_PREFIX):]
        try:
            return _from_stored_token(self._store, token, self._required, self.name)
        except (CredentialStoreError, redis.RedisError) as e:
            logger.warning(f"Credential store unavailable for bearer lookup: {e}")
            return None


class DirectHeaderStrategy:
    """Raw cookie JSON or bridge token in the provider's API-key header."""

    name = "direct_header"

    def __init__(self, store: CredentialStore, required: list[str], header: str):
        self._store = store
        self._required = required
        self._header = header.lower()

    def resolve(self, headers: Mapping[str, str]) -> ResolvedAuth | None:
        value = headers.get(self._header)
        if value is None:
            return None

        if value == "":
            raise AuthEmptyError("Authentication header is empty")

        try:
            pairs = parse_cookie_pairs(value)
        except ValidationError:
            return _from_stored_token(self._store, value, self._required, f"{self.name}_token")

        return ResolvedAuth(cookies=filter_required(pairs, self._required), source=f"{self.name}_json")


class AuthResolver:
    """Runs strategies in priority order until one yields a context."""

    def __init__(self, strategies: list[AuthStrategy]):
        self._strategies = strategies

    @classmethod
    def default(cls, store: CredentialStore, config: BridgeConfig) -> "AuthResolver":
        """Bearer first, then the direct header."""
        return cls([
            BearerTokenStrategy(store, config.required_cookies),
            DirectHeaderStrategy(store, config.required_cookies, config.direct_auth_header),
        ])

    def resolve(self, headers: Mapping[str, str]) -> ResolvedAuth:
        """
        Resolve request headers to upstream session cookies.

        Header names are matched case-insensitively.

        Raises:
            AuthEmptyError: Direct header present but empty.
            AuthMissingError: No strategy produced a context.
        """
        normalized = {k.lower(): v for k, v in headers.items()}

        for strategy in self._strategies:
            resolved = strategy.resolve(normalized)
            if resolved is not None:
                logger.debug(f"Auth resolved via {resolved.source}")
                return resolved

        raise AuthMissingError("Authentication header is missing or invalid")
