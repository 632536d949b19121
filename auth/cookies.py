"""Parsing serialized cookie pairs into upstream session material."""

from pydantic import TypeAdapter

from auth.types import CookiePair

_cookie_list = TypeAdapter(list[CookiePair])


def parse_cookie_pairs(raw: str) -> list[CookiePair]:
    """
    Parse a JSON array of {name, value} objects.

    Raises:
        pydantic.ValidationError: If raw is not JSON or not a list of cookie pairs.
    """
    return _cookie_list.validate_json(raw)


def filter_required(pairs: list[CookiePair], required: list[str]) -> list[CookiePair]:
    """Keep only the required cookies, preserving their original order."""
    wanted = set(required)
    return [pair for pair in pairs if pair.name in wanted]
