"""Slack request verification package."""

from randomizer.auth.tokens import (
    RemoteToken,
    StaticToken,
    TokenProvider,
    get_token_provider,
    token_provider_from_settings,
)

__all__ = [
    "RemoteToken",
    "StaticToken",
    "TokenProvider",
    "get_token_provider",
    "token_provider_from_settings",
]
