"""Tests for message verbosity options."""

from __future__ import annotations

import threading

import pytest

from resultobject.config import reset_settings
from resultobject.verbosity import (
    HEADER_NAME,
    MessageVerbosity,
    get_verbosity,
    set_default_verbosity,
    use_verbosity,
)


class TestMessageVerbosity:
    """Test parsing of verbosity field lists."""

    def test_header_name(self):
        assert HEADER_NAME == "Result-Message-Levels"

    def test_defaults_are_off(self):
        assert MessageVerbosity() == MessageVerbosity.parse(None)
        assert MessageVerbosity().to_header() == ""

    @pytest.mark.parametrize(
        "fields",
        [
            "code,languageCode",
            " Code , LANGUAGECODE ",
            ["code", "language_code"],
            ("CODE", "languagecode", "unknown"),
        ],
    )
    def test_parse_case_insensitive(self, fields):
        assert MessageVerbosity.parse(fields) == MessageVerbosity(code=True, language_code=True)

    def test_parse_ignores_blank_entries(self):
        assert MessageVerbosity.parse("tokens,,") == MessageVerbosity(tokens=True)

    def test_all(self):
        options = MessageVerbosity.all()
        assert options.code and options.template and options.tokens and options.language_code
        assert options.to_header() == "code,languagecode,template,tokens"

    def test_header_round_trip(self):
        options = MessageVerbosity(template=True, tokens=True)
        assert MessageVerbosity.parse(options.to_header()) == options


class TestVerbosityScopes:
    """Test default and scoped verbosity resolution."""

    def test_default_is_minimal(self):
        assert get_verbosity() == MessageVerbosity()

    def test_from_settings(self, monkeypatch):
        monkeypatch.setenv("RESULTOBJECT_MESSAGES_VERBOSITY", "code,tokens")
        reset_settings()
        assert get_verbosity() == MessageVerbosity(code=True, tokens=True)

    def test_process_default(self):
        set_default_verbosity("template")
        assert get_verbosity() == MessageVerbosity(template=True)

        set_default_verbosity(None)
        assert get_verbosity() == MessageVerbosity()

    def test_scoped_override(self):
        set_default_verbosity("code")
        with use_verbosity("tokens") as options:
            assert options == MessageVerbosity(tokens=True)
            assert get_verbosity() == options
        assert get_verbosity() == MessageVerbosity(code=True)

    @pytest.mark.parametrize("header", [None, "", "  "])
    def test_absent_header_keeps_current(self, header):
        set_default_verbosity("code")
        with use_verbosity(header) as options:
            assert options == MessageVerbosity(code=True)

    def test_override_restored_on_error(self):
        with pytest.raises(RuntimeError):
            with use_verbosity(MessageVerbosity.all()):
                raise RuntimeError("boom")
        assert get_verbosity() == MessageVerbosity()

    def test_override_is_per_thread(self):
        seen = []

        def worker():
            seen.append(get_verbosity())

        with use_verbosity("code"):
            thread = threading.Thread(target=worker)
            thread.start()
            thread.join()

        assert seen == [MessageVerbosity()]
