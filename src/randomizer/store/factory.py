"""Store selection from settings."""

from __future__ import annotations

from functools import lru_cache, partial

from randomizer.config import Settings, get_settings
from randomizer.errors import ConfigError
from randomizer.store.base import StoreFactory
from randomizer.store.memory import MemoryStoreFactory
from randomizer.store.sqlite import SQLiteStore


def store_factory_from_settings(settings: Settings) -> StoreFactory:
    backend = settings.store_backend.strip().lower()
    if backend == "sqlite":
        return partial(SQLiteStore, settings.app_db)
    if backend == "memory":
        return MemoryStoreFactory()
    raise ConfigError(f"unknown STORE_BACKEND: {settings.store_backend!r}")


@lru_cache(maxsize=1)
def get_store_factory() -> StoreFactory:
    return store_factory_from_settings(get_settings())
