"""Locale management.

The active locale is held in a ``ContextVar`` so that each thread and each
asyncio task observes its own value: concurrent operations never see each
other's locale changes. When nothing has been set for the current context
the ``locale.default`` setting applies.

Example:
    >>> from resultobject.i18n.locale import get_locale, with_locale
    >>> with with_locale("fr-FR"):
    ...     get_locale()
    'fr-FR'
"""

from __future__ import annotations

import logging
import re
from contextvars import ContextVar
from typing import Any

from resultobject.config import get_settings

logger = logging.getLogger(__name__)


_TAG_PATTERN = re.compile(
    r"^(?P<language>[A-Za-z]{2,3})"
    r"(?:[-_](?P<script>[A-Za-z]{4}))?"
    r"(?:[-_](?P<region>[A-Za-z]{2}|[0-9]{3}))?$"
)

NEUTRAL_LOCALE = ""

_current_locale: ContextVar[str | None] = ContextVar("resultobject_locale", default=None)


# =============================================================================
# Locale Info
# =============================================================================


class LocaleInfo:
    """Parsed locale tag (language, optional script and region)."""

    def __init__(self, language: str, script: str = "", region: str = ""):
        self.language = language.lower()
        self.script = script.title()
        self.region = region.upper()

    @classmethod
    def parse(cls, tag: str) -> "LocaleInfo":
        """Parse a locale tag such as ``fr``, ``en-US`` or ``zh_Hant_TW``.

        Raises:
            ValueError: If the tag is not a well-formed locale identifier.
        """
        match = _TAG_PATTERN.match(tag.strip()) if isinstance(tag, str) else None
        if match is None:
            raise ValueError(f"Invalid locale identifier: {tag!r}")
        return cls(
            match.group("language"),
            match.group("script") or "",
            match.group("region") or "",
        )

    @property
    def code(self) -> str:
        """Normalized tag using ``-`` as separator."""
        return "-".join(part for part in (self.language, self.script, self.region) if part)

    def __str__(self) -> str:
        return self.code

    def __repr__(self) -> str:
        return f"LocaleInfo({self.code!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, LocaleInfo):
            return self.code == other.code
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.code)


def normalize_locale(tag: str) -> str:
    """Return the normalized form of a locale tag."""
    return LocaleInfo.parse(tag).code


def get_fallback_chain(tag: str) -> list[str]:
    """Get the lookup chain for a locale, most specific first.

    The chain ends with the neutral locale (``""``):
    ``zh-Hant-TW -> zh-Hant -> zh -> ""``.
    """
    try:
        info = LocaleInfo.parse(tag)
    except ValueError:
        return [NEUTRAL_LOCALE]

    chain = [info.code]
    if info.script and info.region:
        chain.append(f"{info.language}-{info.script}")
    if info.language not in chain:
        chain.append(info.language)
    chain.append(NEUTRAL_LOCALE)
    return chain


# =============================================================================
# Current locale
# =============================================================================


def get_locale() -> str:
    """Get the active locale for the current context."""
    current = _current_locale.get()
    if current is None:
        return get_settings().get_str("locale.default", "en-US")
    return current


def set_locale(tag: str) -> None:
    """Set the active locale for the current context.

    Raises:
        ValueError: If the tag is not a well-formed locale identifier.
    """
    _current_locale.set(normalize_locale(tag))


def reset_locale() -> None:
    """Forget any locale set in the current context."""
    _current_locale.set(None)


class ScopedLocale:
    """Context manager that temporarily overrides the active locale.

    A blank tag makes the scope a no-op. A tag that cannot be parsed leaves
    the previous locale active. On exit the locale captured on entry is
    restored, whether or not the switch happened and however the block
    exits.

    Example:
        >>> with ScopedLocale("de"):
        ...     render_messages()
    """

    def __init__(self, tag: str | None):
        self.tag = tag
        self.switched = False
        self._previous: str | None = None
        self._active = False

    def __enter__(self) -> "ScopedLocale":
        if self.tag is None or not self.tag.strip():
            return self

        self._active = True
        self._previous = _current_locale.get()
        try:
            _current_locale.set(normalize_locale(self.tag))
            self.switched = True
        except ValueError:
            logger.debug("Locale switch to %r skipped: not a valid locale", self.tag)
        return self

    def __exit__(self, *args: Any) -> None:
        if self._active:
            _current_locale.set(self._previous)
            self._active = False

    @property
    def locale(self) -> str:
        """The locale active inside the scope."""
        return get_locale()


def with_locale(tag: str | None) -> ScopedLocale:
    """Create a scope that switches to ``tag`` for its duration."""
    return ScopedLocale(tag)
