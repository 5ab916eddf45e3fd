"""Localized message catalogs.

A ``ResourceCatalog`` is a named set of per-locale ``MessageCatalog``
objects (``core``, ``validator``, or any catalog an application adds).
Lookups walk the locale fallback chain, so a key missing from ``fr-CA`` is
looked up in ``fr`` and finally in the neutral catalog, which holds the
reference English text.

Catalogs come from loaders:

    DictMessageLoader    {"fr": {"not_found": "..."}, "": {...}}
    FileMessageLoader    messages.yaml, messages_fr.yaml, messages_de-CH.json

Example:
    >>> catalog = ResourceCatalog("app", loaders=[DictMessageLoader({
    ...     "": {"greeting": "Hello {name}"},
    ...     "fr": {"greeting": "Bonjour {name}"},
    ... })])
    >>> catalog.get_string("greeting", "fr-CA")
    'Bonjour {name}'
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import yaml

from resultobject.exceptions import CatalogLoadError
from resultobject.i18n.locale import NEUTRAL_LOCALE, get_fallback_chain, get_locale, normalize_locale

logger = logging.getLogger(__name__)


@runtime_checkable
class ResourceSource(Protocol):
    """Anything that can resolve a resource key to a template."""

    name: str

    def get_string(self, key: str, locale: str | None = None) -> str | None:
        """Get the template for ``key`` in ``locale`` or None if missing."""
        ...


def _normalize(locale_code: str) -> str:
    if not locale_code:
        return NEUTRAL_LOCALE
    return normalize_locale(locale_code)


# =============================================================================
# Message Catalog
# =============================================================================


class MessageCatalog:
    """Catalog of message templates for a single locale.

    Nested mappings are flattened with dot notation:
    ``{"errors": {"timeout": "..."}}`` -> ``errors.timeout``.
    """

    def __init__(
        self,
        locale_code: str,
        messages: dict[str, Any] | None = None,
    ):
        self.locale_code = _normalize(locale_code)
        self._messages: dict[str, str] = {}

        if messages:
            self._load_dict(messages)

    def _load_dict(self, data: dict[str, Any], prefix: str = "") -> None:
        for key, value in data.items():
            full_key = f"{prefix}.{key}" if prefix else str(key)
            if isinstance(value, dict):
                self._load_dict(value, full_key)
            elif value is not None:
                self._messages[full_key] = str(value)

    def update(self, other: "MessageCatalog") -> None:
        """Merge another catalog's messages, overriding existing keys."""
        self._messages.update(other._messages)

    def get(self, key: str) -> str | None:
        return self._messages.get(key)

    def has(self, key: str) -> bool:
        return key in self._messages

    def keys(self) -> list[str]:
        return list(self._messages.keys())

    def __len__(self) -> int:
        return len(self._messages)

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def __repr__(self) -> str:
        return f"MessageCatalog({self.locale_code!r}, {len(self)} messages)"


# =============================================================================
# Message Loaders
# =============================================================================


@runtime_checkable
class MessageLoader(Protocol):
    """Protocol for loading message catalogs."""

    def load(self, locale_code: str) -> MessageCatalog | None:
        """Load the catalog for a locale, or None if unavailable."""
        ...

    def supports(self, locale_code: str) -> bool:
        """Check if this loader can load a locale."""
        ...


class DictMessageLoader:
    """Loads messages from a dictionary keyed by locale code.

    The neutral catalog is keyed by ``""``.
    """

    def __init__(self, messages: dict[str, dict[str, Any]]):
        self._messages = {_normalize(code): data for code, data in messages.items()}

    def load(self, locale_code: str) -> MessageCatalog | None:
        if locale_code in self._messages:
            return MessageCatalog(locale_code, self._messages[locale_code])
        return None

    def supports(self, locale_code: str) -> bool:
        return locale_code in self._messages

    def locales(self) -> list[str]:
        return list(self._messages)


class FileMessageLoader:
    """Loads messages from JSON or YAML files.

    File naming convention:
    - messages.yaml (neutral catalog)
    - messages_{locale}.yaml (e.g., messages_fr.yaml, messages_fr-CA.yml)
    - messages_{locale}.json
    """

    def __init__(
        self,
        directory: str | Path,
        filename_pattern: str = "messages_{locale}",
        extensions: tuple[str, ...] = (".yaml", ".yml", ".json"),
    ):
        self.directory = Path(directory)
        self.filename_pattern = filename_pattern
        self.extensions = extensions

    def _base_name(self, locale_code: str) -> str:
        if not locale_code:
            return self.filename_pattern.replace("_{locale}", "").replace("{locale}", "")
        return self.filename_pattern.format(locale=locale_code)

    def _get_file_path(self, locale_code: str) -> Path | None:
        base_name = self._base_name(locale_code)
        candidates = [base_name]
        if "-" in base_name:
            candidates.append(base_name.replace("-", "_"))
        for name in candidates:
            for ext in self.extensions:
                path = self.directory / f"{name}{ext}"
                if path.exists():
                    return path
        return None

    def load(self, locale_code: str) -> MessageCatalog | None:
        path = self._get_file_path(locale_code)
        if not path:
            return None

        try:
            return MessageCatalog(locale_code, read_catalog_file(path))
        except CatalogLoadError as e:
            logger.warning("Failed to load messages for %r: %s", locale_code, e)
            return None

    def supports(self, locale_code: str) -> bool:
        return self._get_file_path(locale_code) is not None

    def locales(self) -> list[str]:
        """List the locales that have a file in the directory."""
        if not self.directory.is_dir():
            return []

        prefix = self._base_name("")
        found = []
        for path in sorted(self.directory.iterdir()):
            if path.suffix not in self.extensions or not path.stem.startswith(prefix):
                continue
            rest = path.stem[len(prefix):]
            if not rest:
                found.append(NEUTRAL_LOCALE)
            elif rest.startswith("_"):
                try:
                    found.append(normalize_locale(rest[1:]))
                except ValueError:
                    logger.debug("Skipping catalog file with invalid locale: %s", path)
        return found


def read_catalog_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML or JSON catalog file.

    Raises:
        CatalogLoadError: If the file cannot be read or is not a mapping.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix == ".json":
                data = json.load(f)
            elif path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                raise CatalogLoadError(path, f"unsupported file type {path.suffix!r}")
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise CatalogLoadError(path, str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise CatalogLoadError(path, "catalog file must contain a mapping")
    return data


# =============================================================================
# Resource Catalog
# =============================================================================


class ResourceCatalog:
    """A named, multi-locale resource source.

    Catalogs are loaded lazily per locale from the registered loaders and
    cached. Catalogs added explicitly with ``add_catalog`` are merged over
    loaded ones.
    """

    # Locales no loader supports are remembered up to this many, so locales
    # taken from request headers cannot grow the cache without bound.
    max_cached_misses: int = 64

    def __init__(
        self,
        name: str,
        loaders: list[MessageLoader] | None = None,
        catalogs: dict[str, dict[str, Any]] | None = None,
    ):
        self.name = name
        self._loaders: list[MessageLoader] = list(loaders or [])
        self._overrides: dict[str, MessageCatalog] = {}
        self._cache: dict[str, MessageCatalog] = {}
        self._misses: set[str] = set()
        self._lock = threading.RLock()

        for code, messages in (catalogs or {}).items():
            self.add_catalog(MessageCatalog(code, messages))

    def add_loader(self, loader: MessageLoader) -> None:
        """Register a loader; later loaders override earlier ones."""
        with self._lock:
            self._loaders.append(loader)
            self._cache.clear()
            self._misses.clear()

    def add_catalog(self, catalog: MessageCatalog) -> None:
        """Merge a catalog into this resource for its locale."""
        with self._lock:
            existing = self._overrides.get(catalog.locale_code)
            if existing is None:
                self._overrides[catalog.locale_code] = catalog
            else:
                existing.update(catalog)
            self._cache.pop(catalog.locale_code, None)
            self._misses.discard(catalog.locale_code)

    def add_messages(self, locale_code: str, messages: dict[str, Any]) -> None:
        self.add_catalog(MessageCatalog(locale_code, messages))

    def load_directory(self, directory: str | Path) -> list[str]:
        """Eagerly load every catalog file found in a directory.

        Returns:
            The locales loaded.

        Raises:
            CatalogLoadError: If the directory is missing or a file is invalid.
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise CatalogLoadError(directory, "not a directory")

        loader = FileMessageLoader(directory)
        loaded = []
        for code in loader.locales():
            path = loader._get_file_path(code)
            if path is None:
                continue
            self.add_catalog(MessageCatalog(code, read_catalog_file(path)))
            loaded.append(code)

        logger.debug("Loaded %s catalog locales %s from %s", self.name, loaded, directory)
        return loaded

    def reset(self) -> None:
        """Drop cached catalogs so they are reloaded on next access."""
        with self._lock:
            self._cache.clear()
            self._misses.clear()

    def get_catalog(self, locale_code: str) -> MessageCatalog | None:
        """Get the merged catalog for exactly one locale (no fallback)."""
        code = _normalize(locale_code)
        with self._lock:
            if code in self._cache:
                return self._cache[code]
            if code in self._misses:
                return None

            merged: MessageCatalog | None = None
            for loader in self._loaders:
                if not loader.supports(code):
                    continue
                catalog = loader.load(code)
                if catalog is None:
                    continue
                if merged is None:
                    merged = MessageCatalog(code)
                merged.update(catalog)

            override = self._overrides.get(code)
            if override is not None:
                if merged is None:
                    merged = MessageCatalog(code)
                merged.update(override)

            if merged is not None:
                self._cache[code] = merged
            elif len(self._misses) < self.max_cached_misses:
                self._misses.add(code)
            return merged

    def resolve(self, key: str, locale: str | None = None) -> tuple[str | None, str | None]:
        """Resolve a key along the fallback chain.

        Returns:
            ``(template, locale_found)``, or ``(None, None)`` if no catalog
            in the chain has the key.
        """
        requested = locale if locale is not None else get_locale()
        for code in get_fallback_chain(requested):
            catalog = self.get_catalog(code)
            if catalog is not None and key in catalog:
                if code != requested:
                    logger.debug(
                        "Resource %r of %s resolved from %r for locale %r",
                        key, self.name, code or "neutral", requested,
                    )
                return catalog.get(key), code
        return None, None

    def get_string(self, key: str, locale: str | None = None) -> str | None:
        """Get the template for a key, falling back towards neutral."""
        return self.resolve(key, locale)[0]

    def keys(self, locale: str | None = None) -> list[str]:
        """List keys visible from a locale (neutral keys included)."""
        keys: list[str] = []
        for code in reversed(get_fallback_chain(locale if locale is not None else get_locale())):
            catalog = self.get_catalog(code)
            if catalog is None:
                continue
            keys.extend(k for k in catalog.keys() if k not in keys)
        return keys

    def locales(self) -> list[str]:
        """List locales known to the loaders and explicit catalogs."""
        found: list[str] = []
        for loader in self._loaders:
            for code in getattr(loader, "locales", lambda: [])():
                if code not in found:
                    found.append(code)
        for code in self._overrides:
            if code not in found:
                found.append(code)
        return found

    def __contains__(self, key: str) -> bool:
        return self.get_string(key, NEUTRAL_LOCALE) is not None

    def __repr__(self) -> str:
        return f"ResourceCatalog({self.name!r})"
