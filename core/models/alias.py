"""SimpleLogin-compatible alias models.

The upstream has no numeric IDs, so ids are fixed placeholders.
"""

from pydantic import BaseModel, Field

PLACEHOLDER_ID = 1


class CreateAliasRequest(BaseModel):
    """Body of POST /api/alias/random/new. Unknown keys are ignored."""

    note: str | None = None


class Mailbox(BaseModel):
    """Destination mailbox an alias forwards to."""

    id: int = PLACEHOLDER_ID
    email: str


class Contact(BaseModel):
    email: str
    name: str | None = None
    reverse_alias: str


class Activity(BaseModel):
    action: str
    timestamp: int
    contact: Contact


class AliasView(BaseModel):
    """Alias as returned to alias-provider API consumers."""

    id: int = PLACEHOLDER_ID
    alias: str
    name: str | None = None
    enabled: bool
    creation_timestamp: int = Field(..., description="Upstream epoch milliseconds")
    creation_date: str = Field(..., description="RFC 3339, UTC")
    note: str | None = None
    nb_block: int = 0
    nb_forward: int = 0
    nb_reply: int = 0
    support_pgp: bool = False
    disable_pgp: bool = False
    mailbox: Mailbox
    mailboxes: list[Mailbox]
    latest_activity: Activity | None = None
    pinned: bool = False
