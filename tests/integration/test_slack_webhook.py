import asyncio

import pytest
from fastapi.testclient import TestClient

from randomizer.commands.handlers import HANDLERS
from randomizer.commands.types import Operation
from randomizer.config import get_settings
from randomizer.errors import DEFAULT_HELP_TEXT, SecretFetchError
from randomizer.main import app
from randomizer.slack import router as slack_router

TOKEN = "test-token"


def _command(text: str, *, token: str = TOKEN, team_id: str = "T123") -> dict[str, str]:
    return {
        "token": token,
        "team_id": team_id,
        "command": "/randomize",
        "text": text,
        "user_id": "U1",
    }


def test_healthz() -> None:
    client = TestClient(app)
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_readyz_with_sqlite_store() -> None:
    client = TestClient(app)
    response = client.get("/readyz")
    assert response.status_code == 200
    assert response.json()["store"] == "ok"


def test_ssl_check_skips_token() -> None:
    client = TestClient(app)
    response = client.post("/slack", data={"ssl_check": "1", "token": "wrong"})
    assert response.status_code == 200
    assert response.content == b""


def test_invalid_token_rejected() -> None:
    client = TestClient(app)
    response = client.post("/slack", data=_command("a b", token="wrong"))
    assert response.status_code == 403
    assert response.json() == {"error": "invalid_token"}


def test_missing_token_rejected() -> None:
    client = TestClient(app)
    data = _command("a b")
    del data["token"]
    response = client.post("/slack", data=data)
    assert response.status_code == 403


def test_help_is_ephemeral() -> None:
    client = TestClient(app)
    response = client.post("/slack", data=_command(""))
    assert response.status_code == 200
    payload = response.json()
    assert payload["response_type"] == "ephemeral"
    assert "/randomize /list" in payload["text"]


def test_selection_is_in_channel(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("randomizer.commands.service.random.shuffle", lambda options: None)
    client = TestClient(app)
    response = client.post("/slack", data=_command("Alice  Bob\tCarol"))
    payload = response.json()
    assert payload["response_type"] == "in_channel"
    assert payload["text"] == "The winner is... *Alice*!"


def test_groups_are_partitioned_by_team() -> None:
    client = TestClient(app)
    saved = client.post("/slack", data=_command("/save lunch Tacos Pizza", team_id="T1"))
    assert saved.json()["response_type"] == "ephemeral"
    assert "*lunch*" in saved.json()["text"]

    mine = client.post("/slack", data=_command("/list", team_id="T1")).json()
    theirs = client.post("/slack", data=_command("/list", team_id="T2")).json()
    assert "• lunch" in mine["text"]
    assert "don't have any saved groups" in theirs["text"]


def test_user_errors_show_help_text_only() -> None:
    client = TestClient(app)
    response = client.post("/slack", data=_command("/show"))
    payload = response.json()
    assert response.status_code == 200
    assert payload["response_type"] == "ephemeral"
    assert payload["text"] == 'Whoops, "/show" requires an argument!'


def test_non_ascii_count_gets_help_text() -> None:
    client = TestClient(app)
    response = client.post("/slack", data=_command("/n \u00b2 a b c"))
    payload = response.json()
    assert response.status_code == 200
    assert payload["response_type"] == "ephemeral"
    assert payload["text"].startswith('Whoops, "/n" needs a number')


def test_unexpected_handler_error_gets_generic_reply(monkeypatch: pytest.MonkeyPatch) -> None:
    async def broken_list(app, request):
        raise KeyError("partition")

    monkeypatch.setitem(HANDLERS, Operation.LIST, broken_list)
    client = TestClient(app)
    response = client.post("/slack", data=_command("/list"))
    payload = response.json()
    assert response.status_code == 200
    assert payload["response_type"] == "ephemeral"
    assert payload["text"] == DEFAULT_HELP_TEXT


def test_token_fetch_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    async def failing_provider() -> str:
        raise SecretFetchError("loading secret 'slack' from Vault: HTTP 500")

    monkeypatch.setattr(slack_router, "get_token_provider", lambda: failing_provider)
    client = TestClient(app)
    response = client.post("/slack", data=_command("a b"))
    assert response.status_code == 500
    assert response.json() == {"error": "token_unavailable"}


def test_token_lookup_deadline(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COMMAND_TIMEOUT_SECONDS", "0.05")
    get_settings.cache_clear()

    async def slow_provider() -> str:
        await asyncio.sleep(5)
        return TOKEN

    monkeypatch.setattr(slack_router, "get_token_provider", lambda: slow_provider)
    client = TestClient(app)
    response = client.post("/slack", data=_command("a b"))
    assert response.status_code == 503


def test_command_deadline(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("COMMAND_TIMEOUT_SECONDS", "0.05")
    get_settings.cache_clear()

    async def slow_main(self, args) -> None:
        await asyncio.sleep(5)

    monkeypatch.setattr("randomizer.commands.service.App.main", slow_main)
    client = TestClient(app)
    response = client.post("/slack", data=_command("a b"))
    payload = response.json()
    assert response.status_code == 200
    assert payload["response_type"] == "ephemeral"
    assert payload["text"] == slack_router.TIMEOUT_HELP_TEXT


def test_missing_token_configuration(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SLACK_TOKEN", raising=False)
    get_settings.cache_clear()
    client = TestClient(app)
    response = client.post("/slack", data=_command("a b"))
    assert response.status_code == 500
