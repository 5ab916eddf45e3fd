"""Layered configuration for resultobject.

Configuration is merged from sources ordered by priority, later sources
overriding earlier ones:

    FileConfigSource (YAML or JSON file, priority 50)
         |
    EnvConfigSource (RESULTOBJECT_* variables, priority 100)
         |
         v
    Settings (typed access)

Recognized keys:
    locale.default      Locale used when no locale scope is active.
    locale.reference    Reference locale used for invariant content.
    messages.verbosity  Default message fields exposed at the boundary.
    tokens.strict       Raise instead of returning the raw template when
                        a token is missing.
    catalogs.paths      Extra directories holding catalog files.

Usage:
    >>> from resultobject.config import get_settings, load_settings
    >>> settings = load_settings("config/resultobject.yaml")
    >>> settings.get_str("locale.default")
    'en-US'
    >>> get_settings().get_bool("tokens.strict")
    False
"""

from __future__ import annotations

import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import yaml

from resultobject.exceptions import ResultObjectError

logger = logging.getLogger(__name__)


DEFAULT_LOCALE = "en-US"
REFERENCE_LOCALE = "en-US"
ENV_PREFIX = "RESULTOBJECT"

DEFAULTS: dict[str, Any] = {
    "locale": {
        "default": DEFAULT_LOCALE,
        "reference": REFERENCE_LOCALE,
    },
    "messages": {
        "verbosity": [],
    },
    "tokens": {
        "strict": False,
    },
    "catalogs": {
        "paths": [],
    },
}


class ConfigError(ResultObjectError):
    """Base configuration error."""


class ConfigSourceError(ConfigError):
    """Configuration source error."""


# =============================================================================
# Configuration Sources
# =============================================================================


class ConfigSource(ABC):
    """Abstract base class for configuration sources."""

    def __init__(self, priority: int = 0) -> None:
        self._priority = priority

    @property
    def priority(self) -> int:
        """Source priority (higher is applied later and wins)."""
        return self._priority

    @abstractmethod
    def load(self) -> dict[str, Any]:
        """Load configuration from the source."""


class EnvConfigSource(ConfigSource):
    """Environment variable configuration source.

    Example:
        RESULTOBJECT_LOCALE_DEFAULT=fr-FR
        RESULTOBJECT_TOKENS_STRICT=true

        Will produce:
        {"locale": {"default": "fr-FR"}, "tokens": {"strict": True}}
    """

    def __init__(
        self,
        prefix: str = ENV_PREFIX,
        separator: str = "_",
        priority: int = 100,
        environ: dict[str, str] | None = None,
    ) -> None:
        super().__init__(priority)
        self._prefix = prefix
        self._separator = separator
        self._environ = environ

    def load(self) -> dict[str, Any]:
        environ = self._environ if self._environ is not None else os.environ
        result: dict[str, Any] = {}
        prefix = f"{self._prefix}{self._separator}"

        for key, value in environ.items():
            if not key.startswith(prefix):
                continue
            parts = key[len(prefix):].lower().split(self._separator)

            current = result
            for part in parts[:-1]:
                current = current.setdefault(part, {})
            current[parts[-1]] = self._parse_value(value)

        return result

    def _parse_value(self, value: str) -> Any:
        """Parse a string value to the most specific type."""
        lowered = value.lower()
        if lowered in ("true", "yes", "on"):
            return True
        if lowered in ("false", "no", "off"):
            return False
        if lowered in ("null", "none", ""):
            return None

        if value.startswith(("[", "{")):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value


class FileConfigSource(ConfigSource):
    """YAML or JSON file configuration source."""

    def __init__(
        self,
        path: str | Path,
        *,
        required: bool = False,
        priority: int = 50,
    ) -> None:
        super().__init__(priority)
        self._path = Path(path)
        self._required = required

    def load(self) -> dict[str, Any]:
        if not self._path.exists():
            if self._required:
                raise ConfigSourceError(f"Configuration file not found: {self._path}")
            return {}

        content = self._path.read_text(encoding="utf-8")
        suffix = self._path.suffix.lower()

        try:
            if suffix in (".yaml", ".yml"):
                data = yaml.safe_load(content) or {}
            elif suffix == ".json":
                data = json.loads(content)
            else:
                raise ConfigSourceError(f"Unsupported file format: {suffix}")
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            if self._required:
                raise ConfigSourceError(f"Failed to load config: {e}") from e
            logger.warning("Ignoring unreadable configuration file %s: %s", self._path, e)
            return {}

        if not isinstance(data, dict):
            raise ConfigSourceError(
                f"Configuration file {self._path} must contain a mapping"
            )
        return data


# =============================================================================
# Typed Settings
# =============================================================================


class Settings:
    """Typed access to merged configuration values.

    Example:
        >>> settings = Settings({"tokens": {"strict": "yes"}})
        >>> settings.get_bool("tokens.strict")
        True
    """

    def __init__(self, config: dict[str, Any]) -> None:
        self._config = config

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by dot-separated key."""
        current: Any = self._config
        for part in key.split("."):
            if not isinstance(current, dict):
                return default
            current = current.get(part)
            if current is None:
                return default
        return current

    def get_str(self, key: str, default: str = "") -> str:
        value = self.get(key, default)
        return str(value) if value is not None else default

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "yes", "1", "on")
        return bool(value)

    def get_list(self, key: str, default: list[Any] | None = None) -> list[Any]:
        """Get a list value; comma-separated strings are split."""
        value = self.get(key, default)
        if value is None:
            return list(default or [])
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        if isinstance(value, (list, tuple)):
            return list(value)
        return [value]

    def to_dict(self) -> dict[str, Any]:
        return dict(self._config)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __repr__(self) -> str:
        return f"Settings({self._config!r})"


def _merge(base: dict[str, Any], override: dict[str, Any]) -> None:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        elif value is not None:
            base[key] = value


def build_settings(sources: list[ConfigSource]) -> Settings:
    """Merge sources over the defaults, lowest priority first."""
    merged: dict[str, Any] = json.loads(json.dumps(DEFAULTS))
    for source in sorted(sources, key=lambda s: s.priority):
        _merge(merged, source.load())
    return Settings(merged)


# =============================================================================
# Global settings
# =============================================================================


_settings: Settings | None = None
_lock = threading.Lock()


def load_settings(
    path: str | Path | None = None,
    *,
    env_prefix: str = ENV_PREFIX,
) -> Settings:
    """Load settings from an optional file and the environment.

    Args:
        path: Optional YAML/JSON configuration file (must exist if given).
        env_prefix: Environment variable prefix.

    Returns:
        The new global Settings.
    """
    global _settings

    sources: list[ConfigSource] = [EnvConfigSource(prefix=env_prefix)]
    if path is not None:
        sources.append(FileConfigSource(path, required=True))

    settings = build_settings(sources)
    with _lock:
        _settings = settings
    logger.debug("Loaded settings: %r", settings)
    return settings


def get_settings() -> Settings:
    """Get the global settings, loading them on first use."""
    with _lock:
        current = _settings
    if current is None:
        return load_settings()
    return current


def reset_settings() -> None:
    """Drop the cached settings so the next access reloads them."""
    global _settings

    with _lock:
        _settings = None
