"""Identifier casing helpers used for message codes and wire names."""

from __future__ import annotations

import re

_CAPITALS = re.compile(r"[A-Z]+")


def _split_capitals(value: str, separator: str) -> str:
    return _CAPITALS.sub(
        lambda m: f"{separator}{m.group(0).lower()}" if m.start() > 0 else m.group(0).lower(),
        value,
    )


def to_kebab_case(value: str) -> str:
    """Convert a camel/Pascal/snake identifier to kebab-case.

    A leading ``message-`` prefix is dropped, so resource keys such as
    ``Message_Property_Required`` become ``property-required``.

    Example:
        >>> to_kebab_case("NotFound")
        'not-found'
        >>> to_kebab_case("value_not_greater_than")
        'value-not-greater-than'
    """
    result = _split_capitals(value, "-")
    result = re.sub(r"_+", "-", result)
    result = re.sub(r"-{2,}", "-", result)
    return re.sub(r"^message-", "", result, flags=re.IGNORECASE)


def to_snake_case(value: str) -> str:
    """Convert a camel/Pascal/kebab identifier to snake_case.

    Example:
        >>> to_snake_case("MessageValueNotWithinInclusiveRange")
        'value_not_within_inclusive_range'
    """
    result = _split_capitals(value, "-")
    result = re.sub(r"-+", "_", result)
    result = re.sub(r"_{2,}", "_", result)
    return re.sub(r"^message_", "", result, flags=re.IGNORECASE)


def lower_camel(value: str) -> str:
    """Lower-case the first character of an identifier."""
    if not value:
        return value
    return value[0].lower() + value[1:]
