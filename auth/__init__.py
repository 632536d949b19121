"""Authentication: credential storage and request auth resolution."""

from auth.exceptions import (
    AuthError,
    AuthMissingError,
    AuthEmptyError,
    IncompleteCredentialError,
)
from auth.types import (
    CookiePair,
    Credential,
    CredentialRequest,
    ResolvedAuth,
)
from auth.config import BridgeConfig
from auth.credential_store import CredentialStore, CredentialStoreError
from auth.resolver import AuthResolver, BearerTokenStrategy, DirectHeaderStrategy
from auth.security_logger import SecurityLogger, SecurityEvent
from auth.security_middleware import AdminAuthMiddleware
