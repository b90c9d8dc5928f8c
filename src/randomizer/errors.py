"""Randomizer exception hierarchy.

Every randomizer error carries two independent messages: the cause, which is
the exception's ``str()`` and goes to logs, and ``help_text``, which is safe
to show to the user who ran the command.
"""

DEFAULT_HELP_TEXT = "Whoops, something went wrong on my end. Please try again later."


class RandomizerError(Exception):
    """Base exception for all randomizer errors."""

    def __init__(self, cause: str = "", *, help_text: str = DEFAULT_HELP_TEXT) -> None:
        super().__init__(cause)
        self.help_text = help_text


class MissingOperandError(RandomizerError):
    """A flag that operates on a group was given without a group name."""

    def __init__(self, flag: str) -> None:
        super().__init__(
            f'"{flag}" flag requires an argument',
            help_text=f'Whoops, "{flag}" requires an argument!',
        )
        self.flag = flag


class UsageError(RandomizerError):
    """The command was well formed but can't be carried out as written."""

    def __init__(self, cause: str, *, help_text: str | None = None) -> None:
        super().__init__(cause, help_text=help_text or f"Whoops, {cause}.")


class StoreError(RandomizerError):
    """The group store failed while carrying out an operation."""

    def __init__(self, cause: str) -> None:
        super().__init__(
            cause,
            help_text="Whoops, I had trouble getting to your saved groups. Please try again.",
        )


class SecretFetchError(RandomizerError):
    """The expected verification token could not be loaded."""


class ConfigError(RandomizerError):
    """Invalid or missing configuration."""
