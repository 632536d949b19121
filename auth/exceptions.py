"""Typed exceptions for auth failures."""


class AuthError(Exception):
    """Base class for authentication/authorization errors."""


class AuthMissingError(AuthError):
    """No usable auth source on the request (no bearer match, no direct header)."""


class AuthEmptyError(AuthError):
    """Direct auth header is present but empty. Fails before any store lookup."""


class IncompleteCredentialError(AuthError):
    """
    Credential resolved but lacks one or more required upstream cookies.

    Distinct from AuthMissingError: the caller did authenticate, the stored
    (or supplied) session material is what's misconfigured.
    """

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Required cookies not found in credential: {', '.join(missing)}")
