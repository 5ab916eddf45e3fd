"""Message verbosity options.

Controls which optional ``Message`` fields are kept when a message is
serialized at the system boundary. ``type`` and ``content`` are always
present; ``code``, ``template``, ``tokens`` and ``languageCode`` are each
included only when enabled.

Resolution order for the current operation:
    1. An override installed with ``use_verbosity`` (per thread / task).
    2. The process default set with ``set_default_verbosity``.
    3. The ``messages.verbosity`` setting.

Example:
    >>> options = MessageVerbosity.parse("code, languageCode")
    >>> with use_verbosity(options):
    ...     payload = result.to_dict()
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass

from resultobject.config import get_settings

HEADER_NAME = "Result-Message-Levels"

FIELD_NAMES = ("code", "languagecode", "template", "tokens")


@dataclass(frozen=True)
class MessageVerbosity:
    """Which optional message fields cross the boundary."""

    code: bool = False
    template: bool = False
    tokens: bool = False
    language_code: bool = False

    @classmethod
    def parse(cls, fields: str | Iterable[str] | None) -> "MessageVerbosity":
        """Build options from a list of field names.

        Names are case-insensitive; a string is split on commas. Unknown
        names are ignored.

        Example:
            >>> MessageVerbosity.parse("Code,TEMPLATE")
            MessageVerbosity(code=True, template=True, tokens=False, language_code=False)
        """
        if fields is None:
            return cls()
        if isinstance(fields, str):
            fields = fields.split(",")

        names = {name.strip().lower().replace("_", "") for name in fields if name}
        return cls(
            code="code" in names,
            template="template" in names,
            tokens="tokens" in names,
            language_code="languagecode" in names,
        )

    @classmethod
    def all(cls) -> "MessageVerbosity":
        return cls(code=True, template=True, tokens=True, language_code=True)

    def to_header(self) -> str:
        """Render as the comma-separated field list used by the header."""
        enabled = [
            name
            for name, flag in zip(
                FIELD_NAMES,
                (self.code, self.language_code, self.template, self.tokens),
            )
            if flag
        ]
        return ",".join(enabled)


_override: ContextVar[MessageVerbosity | None] = ContextVar(
    "resultobject_verbosity", default=None
)
_default: MessageVerbosity | None = None
_lock = threading.Lock()


def get_verbosity() -> MessageVerbosity:
    """Get the verbosity options in effect for the current operation."""
    current = _override.get()
    if current is not None:
        return current
    with _lock:
        default = _default
    if default is not None:
        return default
    return MessageVerbosity.parse(get_settings().get_list("messages.verbosity"))


def set_default_verbosity(options: MessageVerbosity | str | Iterable[str] | None) -> None:
    """Set the process-wide fallback used when no override is active.

    Passing None reverts to the ``messages.verbosity`` setting.
    """
    global _default

    if options is not None and not isinstance(options, MessageVerbosity):
        options = MessageVerbosity.parse(options)
    with _lock:
        _default = options


@contextmanager
def use_verbosity(options: MessageVerbosity | str | Iterable[str] | None) -> Iterator[MessageVerbosity]:
    """Override the verbosity options for the current operation.

    A None or empty field list (for example an absent request header)
    leaves the current options in place.
    """
    if options is None or (isinstance(options, str) and not options.strip()):
        yield get_verbosity()
        return

    if not isinstance(options, MessageVerbosity):
        options = MessageVerbosity.parse(options)

    token = _override.set(options)
    try:
        yield options
    finally:
        _override.reset(token)
