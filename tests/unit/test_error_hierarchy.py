"""Tests for error hierarchy."""

from randomizer.errors import (
    DEFAULT_HELP_TEXT,
    ConfigError,
    MissingOperandError,
    RandomizerError,
    SecretFetchError,
    StoreError,
    UsageError,
)


def test_hierarchy() -> None:
    assert issubclass(MissingOperandError, RandomizerError)
    assert issubclass(UsageError, RandomizerError)
    assert issubclass(StoreError, RandomizerError)
    assert issubclass(SecretFetchError, RandomizerError)
    assert issubclass(ConfigError, RandomizerError)


def test_cause_and_help_text_are_separate() -> None:
    err = StoreError("saving group 'lunch': disk I/O error")
    assert str(err) == "saving group 'lunch': disk I/O error"
    assert "disk" not in err.help_text


def test_default_help_text() -> None:
    assert SecretFetchError("vault down").help_text == DEFAULT_HELP_TEXT


def test_usage_error_derives_help_text() -> None:
    err = UsageError("I need a number")
    assert err.help_text == "Whoops, I need a number."
    custom = UsageError("internal detail", help_text="Friendly message")
    assert custom.help_text == "Friendly message"
    assert str(custom) == "internal detail"


def test_missing_operand_names_flag() -> None:
    err = MissingOperandError("/delete")
    assert err.flag == "/delete"
    assert str(err) == '"/delete" flag requires an argument'
    assert err.help_text == 'Whoops, "/delete" requires an argument!'


def test_catch_as_randomizer_error() -> None:
    try:
        raise StoreError("test")
    except RandomizerError as exc:
        assert exc.help_text
