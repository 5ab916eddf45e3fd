"""Tests for locale parsing and scoped locale switching."""

from __future__ import annotations

import asyncio
import threading

import pytest

from resultobject.config import reset_settings
from resultobject.i18n.casing import lower_camel, to_kebab_case, to_snake_case
from resultobject.i18n.locale import (
    LocaleInfo,
    ScopedLocale,
    get_fallback_chain,
    get_locale,
    normalize_locale,
    set_locale,
    with_locale,
)


# =============================================================================
# Locale Info Tests
# =============================================================================


class TestLocaleInfo:
    """Test LocaleInfo parsing."""

    @pytest.mark.parametrize(
        ("tag", "expected"),
        [
            ("fr", "fr"),
            ("en-us", "en-US"),
            ("pt_BR", "pt-BR"),
            ("zh-hant-tw", "zh-Hant-TW"),
            ("es-419", "es-419"),
        ],
    )
    def test_parse_normalizes(self, tag, expected):
        assert normalize_locale(tag) == expected

    @pytest.mark.parametrize("tag", ["", "x", "english", "en-", "en-US-extra", "12"])
    def test_parse_invalid(self, tag):
        with pytest.raises(ValueError):
            LocaleInfo.parse(tag)

    def test_parts(self):
        info = LocaleInfo.parse("zh_Hant_TW")
        assert (info.language, info.script, info.region) == ("zh", "Hant", "TW")

    def test_equality(self):
        assert LocaleInfo.parse("en_us") == LocaleInfo.parse("en-US")
        assert len({LocaleInfo.parse("fr"), LocaleInfo.parse("FR")}) == 1


class TestFallbackChain:
    """Test locale fallback chains."""

    def test_region(self):
        assert get_fallback_chain("fr-CA") == ["fr-CA", "fr", ""]

    def test_language_only(self):
        assert get_fallback_chain("de") == ["de", ""]

    def test_script_and_region(self):
        assert get_fallback_chain("zh-Hant-TW") == ["zh-Hant-TW", "zh-Hant", "zh", ""]

    def test_invalid_tag_uses_neutral(self):
        assert get_fallback_chain("not a locale") == [""]


# =============================================================================
# Scoped Locale Tests
# =============================================================================


class TestScopedLocale:
    """Test with_locale scopes."""

    def test_default_locale(self):
        assert get_locale() == "en-US"

    def test_default_from_settings(self, monkeypatch):
        monkeypatch.setenv("RESULTOBJECT_LOCALE_DEFAULT", "de-DE")
        reset_settings()
        assert get_locale() == "de-DE"

    def test_switch_and_restore(self):
        with with_locale("fr-fr") as scope:
            assert scope.switched
            assert get_locale() == "fr-FR"
            assert scope.locale == "fr-FR"
        assert get_locale() == "en-US"

    @pytest.mark.parametrize("tag", [None, "", "   "])
    def test_blank_tag_is_noop(self, tag):
        set_locale("es")
        with with_locale(tag) as scope:
            assert not scope.switched
            assert get_locale() == "es"
        assert get_locale() == "es"

    def test_invalid_tag_keeps_previous(self):
        set_locale("de")
        with with_locale("not-a-real-locale-tag") as scope:
            assert not scope.switched
            assert get_locale() == "de"
        assert get_locale() == "de"

    def test_restores_on_error(self):
        set_locale("es")
        with pytest.raises(RuntimeError):
            with with_locale("fr"):
                raise RuntimeError("boom")
        assert get_locale() == "es"

    def test_nested_scopes(self):
        with with_locale("fr"):
            with with_locale("de"):
                assert get_locale() == "de"
            assert get_locale() == "fr"
        assert get_locale() == "en-US"

    def test_scoped_locale_class(self):
        scope = ScopedLocale("it")
        with scope:
            assert get_locale() == "it"
        assert get_locale() == "en-US"

    def test_set_locale_invalid(self):
        with pytest.raises(ValueError):
            set_locale("??")


class TestLocaleIsolation:
    """Test that concurrent operations do not share the active locale."""

    def test_threads(self):
        seen: dict[str, list[str]] = {}
        barrier = threading.Barrier(3)

        def worker(tag: str):
            with with_locale(tag):
                barrier.wait()
                seen[tag] = [get_locale() for _ in range(50)]

        threads = [threading.Thread(target=worker, args=(tag,)) for tag in ("fr", "de", "es")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        for tag, values in seen.items():
            assert set(values) == {tag}
        assert get_locale() == "en-US"

    def test_async_tasks(self):
        async def worker(tag: str) -> list[str]:
            with with_locale(tag):
                observed = []
                for _ in range(5):
                    await asyncio.sleep(0)
                    observed.append(get_locale())
                return observed

        async def main():
            return await asyncio.gather(worker("fr"), worker("de"))

        fr, de = asyncio.run(main())
        assert set(fr) == {"fr"}
        assert set(de) == {"de"}


# =============================================================================
# Casing Tests
# =============================================================================


class TestCasing:
    """Test identifier casing helpers."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("NotFound", "not-found"),
            ("ValidationError", "validation-error"),
            ("value_not_greater_than", "value-not-greater-than"),
            ("Message_Property_Required", "property-required"),
            ("MessageValueInvalid", "value-invalid"),
            ("already-kebab", "already-kebab"),
            ("double__underscore", "double-underscore"),
        ],
    )
    def test_to_kebab_case(self, value, expected):
        assert to_kebab_case(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("MessageValueNotWithinInclusiveRange", "value_not_within_inclusive_range"),
            ("not-found", "not_found"),
            ("someValue", "some_value"),
        ],
    )
    def test_to_snake_case(self, value, expected):
        assert to_snake_case(value) == expected

    def test_lower_camel(self):
        assert lower_camel("PropertyName") == "propertyName"
        assert lower_camel("") == ""
