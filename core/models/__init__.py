"""Core domain models."""

from core.models.alias import (
    Activity,
    AliasView,
    Contact,
    CreateAliasRequest,
    Mailbox,
)

__all__ = [
    "Activity", "AliasView", "Contact", "CreateAliasRequest", "Mailbox",
]
