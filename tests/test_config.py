"""Tests for layered configuration."""

from __future__ import annotations

import json

import pytest

from resultobject.config import (
    ConfigSourceError,
    EnvConfigSource,
    FileConfigSource,
    Settings,
    build_settings,
    get_settings,
    load_settings,
)


# =============================================================================
# Source Tests
# =============================================================================


class TestEnvConfigSource:
    """Test environment variable parsing."""

    def test_nested_keys(self):
        source = EnvConfigSource(
            environ={
                "RESULTOBJECT_LOCALE_DEFAULT": "fr-FR",
                "RESULTOBJECT_TOKENS_STRICT": "yes",
                "OTHER_VALUE": "ignored",
            }
        )
        assert source.load() == {"locale": {"default": "fr-FR"}, "tokens": {"strict": True}}

    def test_json_values(self):
        source = EnvConfigSource(environ={"RESULTOBJECT_CATALOGS_PATHS": '["/a", "/b"]'})
        assert source.load() == {"catalogs": {"paths": ["/a", "/b"]}}

    def test_custom_prefix(self):
        source = EnvConfigSource(prefix="APP", environ={"APP_TOKENS_STRICT": "off"})
        assert source.load() == {"tokens": {"strict": False}}


class TestFileConfigSource:
    """Test YAML and JSON configuration files."""

    def test_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("locale:\n  default: de-DE\n", encoding="utf-8")
        assert FileConfigSource(path).load() == {"locale": {"default": "de-DE"}}

    def test_json(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"tokens": {"strict": True}}), encoding="utf-8")
        assert FileConfigSource(path).load() == {"tokens": {"strict": True}}

    def test_missing_optional(self, tmp_path):
        assert FileConfigSource(tmp_path / "none.yaml").load() == {}

    def test_missing_required(self, tmp_path):
        with pytest.raises(ConfigSourceError):
            FileConfigSource(tmp_path / "none.yaml", required=True).load()

    def test_unsupported_format(self, tmp_path):
        path = tmp_path / "settings.ini"
        path.write_text("[x]", encoding="utf-8")
        with pytest.raises(ConfigSourceError):
            FileConfigSource(path).load()

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigSourceError):
            FileConfigSource(path).load()


# =============================================================================
# Settings Tests
# =============================================================================


class TestSettings:
    """Test typed access and merging."""

    def test_defaults(self):
        settings = get_settings()
        assert settings.get_str("locale.default") == "en-US"
        assert settings.get_str("locale.reference") == "en-US"
        assert settings.get_bool("tokens.strict") is False
        assert settings.get_list("catalogs.paths") == []

    def test_typed_getters(self):
        settings = Settings({"a": {"b": "yes", "c": "x, y", "d": 3}})
        assert settings.get_bool("a.b") is True
        assert settings.get_list("a.c") == ["x", "y"]
        assert settings.get_list("a.d") == [3]
        assert settings.get("a.missing", "fallback") == "fallback"
        assert "a.b" in settings

    def test_env_overrides_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("locale:\n  default: de-DE\n  reference: en-GB\n", encoding="utf-8")
        env = EnvConfigSource(environ={"RESULTOBJECT_LOCALE_DEFAULT": "es-ES"})

        settings = build_settings([env, FileConfigSource(path)])
        assert settings.get_str("locale.default") == "es-ES"
        assert settings.get_str("locale.reference") == "en-GB"
        assert settings.get_bool("tokens.strict") is False

    def test_load_settings_replaces_global(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("messages:\n  verbosity: [code]\n", encoding="utf-8")

        settings = load_settings(path)
        assert get_settings() is settings
        assert settings.get_list("messages.verbosity") == ["code"]

    def test_load_settings_missing_file(self, tmp_path):
        with pytest.raises(ConfigSourceError):
            load_settings(tmp_path / "missing.yaml")
