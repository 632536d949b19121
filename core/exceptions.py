"""Domain errors raised by core services."""


class MalformedRequestError(Exception):
    """Caller's body doesn't match the expected alias-creation shape."""


class CredentialNotFoundError(Exception):
    """No stored credential has the given token."""


class AliasTranslationError(Exception):
    """Upstream alias record can't be rendered (e.g. timestamp out of range)."""
