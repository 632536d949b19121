"""UTC-everywhere time handling. Eliminates timezone bugs at the source."""

from datetime import datetime, timedelta, timezone


def now_utc() -> datetime:
    """
    Current time in UTC.

    Use this instead of datetime.now() everywhere.
    """
    return datetime.now(timezone.utc)


def from_epoch_millis(millis: int) -> datetime:
    """
    UTC datetime for epoch milliseconds, exact to the millisecond.

    Raises:
        ValueError: If the timestamp is outside the representable range.
    """
    seconds, remainder = divmod(millis, 1000)
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc) + timedelta(milliseconds=remainder)
    except (OverflowError, OSError, ValueError) as e:
        raise ValueError(f"Timestamp {millis} out of range: {e}")


def to_rfc3339(dt: datetime) -> str:
    """
    RFC 3339 string with explicit offset.

    Fractional seconds appear only when non-zero, at millisecond or
    microsecond precision as needed.

    Raises ValueError if datetime is naive (no timezone).
    """
    if dt.tzinfo is None:
        raise ValueError(
            "Cannot format naive datetime. Datetime must be timezone-aware."
        )
    if dt.microsecond == 0:
        timespec = "seconds"
    elif dt.microsecond % 1000 == 0:
        timespec = "milliseconds"
    else:
        timespec = "microseconds"
    return dt.isoformat(timespec=timespec)
