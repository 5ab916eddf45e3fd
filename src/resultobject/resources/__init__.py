"""Built-in message catalogs.

``CORE_MESSAGES`` holds the fixed result messages (``not_found``,
``unauthorized``, ``forbidden``); ``VALIDATOR_MESSAGES`` holds one template
per validation rule. Both ship a neutral English catalog plus French,
Spanish and German translations.

Directories listed in the ``catalogs.paths`` setting are searched for a
sub-directory named after each catalog (``<path>/core``,
``<path>/validator``); files found there override the built-in entries.
"""

from __future__ import annotations

import logging
from pathlib import Path

from resultobject.config import get_settings
from resultobject.i18n.catalog import FileMessageLoader, MessageCatalog, ResourceCatalog

logger = logging.getLogger(__name__)

RESOURCE_DIR = Path(__file__).parent


class BuiltinCatalog(ResourceCatalog):
    """Resource catalog shipped with the package, extendable via settings."""

    def __init__(self, name: str):
        super().__init__(name, loaders=[FileMessageLoader(RESOURCE_DIR / name)])
        self._builtin_loaders = list(self._loaders)
        self._configured = False

    def _configure(self) -> None:
        if self._configured:
            return
        self._configured = True
        for path in get_settings().get_list("catalogs.paths"):
            directory = Path(path) / self.name
            if directory.is_dir():
                logger.debug("Adding %s catalog directory %s", self.name, directory)
                self._loaders.append(FileMessageLoader(directory))

    def get_catalog(self, locale_code: str) -> MessageCatalog | None:
        with self._lock:
            self._configure()
        return super().get_catalog(locale_code)

    def reset(self) -> None:
        """Forget cached catalogs and configured directories."""
        with self._lock:
            self._loaders = list(self._builtin_loaders)
            self._configured = False
            super().reset()


CORE_MESSAGES = BuiltinCatalog("core")
VALIDATOR_MESSAGES = BuiltinCatalog("validator")

CATALOGS: dict[str, ResourceCatalog] = {
    "core": CORE_MESSAGES,
    "validator": VALIDATOR_MESSAGES,
}


def get_catalog(name: str) -> ResourceCatalog:
    """Get a built-in catalog by name.

    Raises:
        KeyError: If no catalog has that name.
    """
    try:
        return CATALOGS[name]
    except KeyError:
        raise KeyError(
            f"Unknown catalog {name!r}. Available: {', '.join(sorted(CATALOGS))}"
        ) from None


def reset_catalogs() -> None:
    """Reset every built-in catalog."""
    for catalog in CATALOGS.values():
        catalog.reset()


__all__ = [
    "BuiltinCatalog",
    "CATALOGS",
    "CORE_MESSAGES",
    "RESOURCE_DIR",
    "VALIDATOR_MESSAGES",
    "get_catalog",
    "reset_catalogs",
]
