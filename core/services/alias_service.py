"""
Alias service - create an iCloud alias on behalf of an alias-provider client.

Auth resolution and alias creation are separate calls so the HTTP layer can
reject unauthenticated requests before it looks at the body.
"""

import logging
from typing import Mapping

from auth.config import BridgeConfig
from auth.exceptions import AuthEmptyError, AuthMissingError, IncompleteCredentialError
from auth.resolver import AuthResolver
from auth.security_logger import SecurityEvent, SecurityLogger
from auth.types import ResolvedAuth
from clients.icloud_client import ICloudHmeClient
from core.alias_translator import to_alias_view
from core.models.alias import AliasView

logger = logging.getLogger(__name__)


class AliasService:
    """Service for alias creation."""

    def __init__(
        self,
        resolver: AuthResolver,
        hme_client: ICloudHmeClient,
        config: BridgeConfig,
        security_logger: SecurityLogger | None = None,
    ):
        self._resolver = resolver
        self._hme_client = hme_client
        self._config = config
        self._security_logger = security_logger or SecurityLogger()

    def authenticate(self, headers: Mapping[str, str], ip_address: str | None = None) -> ResolvedAuth:
        """
        Resolve request headers to a complete upstream session.

        Raises:
            AuthEmptyError: Direct auth header present but empty.
            AuthMissingError: No usable auth source.
            IncompleteCredentialError: Resolved, but required cookies missing.
        """
        try:
            auth = self._resolver.resolve(headers)
        except AuthEmptyError:
            self._security_logger.log(SecurityEvent.AUTH_EMPTY, ip_address=ip_address)
            raise
        except AuthMissingError:
            self._security_logger.log(SecurityEvent.AUTH_MISSING, ip_address=ip_address)
            raise

        missing = auth.missing_cookies(self._config.required_cookies)
        if missing:
            self._security_logger.log(
                SecurityEvent.CREDENTIAL_INCOMPLETE,
                ip_address=ip_address,
                details={"source": auth.source, "missing": missing},
            )
            raise IncompleteCredentialError(missing)

        self._security_logger.log(
            SecurityEvent.AUTH_RESOLVED,
            ip_address=ip_address,
            details={"source": auth.source},
        )
        return auth

    def create_alias(self, auth: ResolvedAuth, note: str | None = None) -> AliasView:
        """
        Reserve a new alias and translate it for the caller.

        Every call creates a new alias upstream.

        Raises:
            UpstreamError: Any failure in the validate/generate/reserve handshake.
            AliasTranslationError: Upstream timestamp unrepresentable.
        """
        record = self._hme_client.generate_and_reserve(
            auth.cookie_header,
            label=self._config.alias_label,
            note=note if note is not None else self._config.default_note,
        )
        return to_alias_view(record, self._config.fallback_mailbox)
