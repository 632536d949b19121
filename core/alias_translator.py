"""Map reserved iCloud aliases to the SimpleLogin alias shape. Pure, no I/O."""

from clients.icloud_client import ReservedAlias
from core.exceptions import AliasTranslationError
from core.models.alias import AliasView, Mailbox
from utils.timezone import from_epoch_millis, to_rfc3339


def to_alias_view(record: ReservedAlias, fallback_mailbox: str) -> AliasView:
    """
    Translate an upstream alias record.

    Counters are zero, PGP flags false and latest_activity absent; the
    upstream doesn't track any of them.

    Raises:
        AliasTranslationError: If create_timestamp can't be represented.
    """
    try:
        created = from_epoch_millis(record.create_timestamp)
    except ValueError as e:
        raise AliasTranslationError(str(e))

    mailbox = Mailbox(email=record.forward_to_email or fallback_mailbox)

    return AliasView(
        alias=record.address,
        name=record.label,
        enabled=record.is_active,
        creation_timestamp=record.create_timestamp,
        creation_date=to_rfc3339(created),
        note=record.note,
        mailbox=mailbox,
        mailboxes=[mailbox.model_copy()],
    )
