"""Providers for the expected Slack verification token."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from functools import lru_cache

from randomizer.auth.vault import VaultClient
from randomizer.config import Settings, get_settings
from randomizer.errors import ConfigError

logger = logging.getLogger(__name__)

# Any coroutine that returns the token Slack is expected to send.
TokenProvider = Callable[[], Awaitable[str]]

SecretFetch = Callable[[str], Awaitable[str]]


class StaticToken:
    source = "static"

    def __init__(self, token: str) -> None:
        self._token = token

    async def __call__(self) -> str:
        return self._token


class RemoteToken:
    """Fetches a token remotely and caches it for ``ttl`` seconds.

    At most one coroutine checks and refreshes the cache at a time, so a burst
    of requests at expiry triggers a single fetch. Callers bound the wait with
    ``asyncio.timeout``; a caller cancelled before it gets the lock leaves the
    cache untouched. Failed fetches are not cached, so the next call retries.
    """

    source = "remote"

    def __init__(
        self,
        fetch: SecretFetch,
        name: str,
        ttl: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl <= 0:
            raise ConfigError(f"token TTL must be positive, got {ttl}")
        self.name = name
        self.ttl = ttl
        self._fetch = fetch
        self._clock = clock
        self._lock: asyncio.Lock | None = None
        self._lock_loop: asyncio.AbstractEventLoop | None = None
        self._value = ""
        self._expiry: float | None = None

    @property
    def expiry(self) -> float | None:
        """Clock reading after which the cached token must be fetched again."""
        return self._expiry

    def _loop_lock(self) -> asyncio.Lock:
        # asyncio.Lock binds to the first loop that waits on it; a new loop
        # (a second asyncio.run or app lifespan) gets a fresh lock.
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    async def __call__(self) -> str:
        async with self._loop_lock():
            if self._expiry is not None and self._clock() < self._expiry:
                return self._value

            logger.info("Refreshing Slack token from %s", self.name)
            value = await self._fetch(self.name)
            self._value = value
            self._expiry = self._clock() + self.ttl
            return value


def token_provider_from_settings(settings: Settings) -> StaticToken | RemoteToken:
    """Build the token provider the environment asks for.

    SLACK_TOKEN selects a static token. Otherwise SLACK_TOKEN_SECRET_NAME
    selects a Vault-backed token cached for SLACK_TOKEN_TTL_SECONDS.
    """
    if settings.slack_token:
        return StaticToken(settings.slack_token)

    if settings.slack_token_secret_name:
        client = VaultClient(
            settings.vault_addr,
            settings.vault_token,
            mount=settings.vault_mount,
            field=settings.vault_field,
            timeout=settings.vault_timeout_seconds,
        )
        return RemoteToken(
            client.read,
            settings.slack_token_secret_name,
            settings.slack_token_ttl_seconds,
        )

    raise ConfigError("missing SLACK_TOKEN or SLACK_TOKEN_SECRET_NAME in environment")


@lru_cache(maxsize=1)
def get_token_provider() -> StaticToken | RemoteToken:
    return token_provider_from_settings(get_settings())
