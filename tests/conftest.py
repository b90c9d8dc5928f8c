from pathlib import Path

import pytest

from randomizer.auth import get_token_provider
from randomizer.config import get_settings
from randomizer.slack.router import limiter
from randomizer.store.factory import get_store_factory

TEST_TOKEN = "test-token"


def _clear_caches() -> None:
    get_settings.cache_clear()
    get_token_provider.cache_clear()
    get_store_factory.cache_clear()


@pytest.fixture(autouse=True)
def test_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("APP_ENV", "dev")
    monkeypatch.setenv("APP_DB", str(tmp_path / "test.db"))
    monkeypatch.setenv("STORE_BACKEND", "sqlite")
    monkeypatch.setenv("SLACK_TOKEN", TEST_TOKEN)
    monkeypatch.delenv("SLACK_TOKEN_SECRET_NAME", raising=False)
    monkeypatch.setenv("COMMAND_NAME", "/randomize")
    _clear_caches()
    limiter.reset()
    yield
    _clear_caches()
