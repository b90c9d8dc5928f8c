"""Slack slash command webhook route."""

import asyncio
import hmac
import logging
from urllib.parse import parse_qs
from uuid import uuid4

from fastapi import APIRouter, Request, Response, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address

from randomizer.auth import get_token_provider
from randomizer.commands.service import App
from randomizer.config import get_settings
from randomizer.errors import DEFAULT_HELP_TEXT, RandomizerError
from randomizer.logging import bind_context, clear_context
from randomizer.store.factory import get_store_factory

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/slack", tags=["slack"])

limiter = Limiter(key_func=get_remote_address)

TIMEOUT_HELP_TEXT = "Whoops, that took longer than I expected. Please try again."


def _command_rate_limit() -> str:
    return f"{get_settings().rate_limit_commands_per_minute}/minute"


def _reply(text: str, *, in_channel: bool) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "response_type": "in_channel" if in_channel else "ephemeral",
            "text": text,
        },
    )


async def _read_form(request: Request) -> dict[str, str]:
    body = (await request.body()).decode("utf-8", errors="replace")
    return {key: values[0] for key, values in parse_qs(body, keep_blank_values=True).items()}


@router.post("")
@limiter.limit(_command_rate_limit)
async def slash_command(request: Request) -> Response:
    """Handle a Slack slash command invocation."""
    settings = get_settings()
    form = await _read_form(request)
    team_id = form.get("team_id", "")

    clear_context()
    bind_context(request_id=uuid4().hex, team_id=team_id)

    # Slack periodically probes the endpoint's certificate with this flag.
    if form.get("ssl_check") == "1":
        return Response(status_code=status.HTTP_200_OK)

    # One deadline covers the token lookup and the command, since Slack only
    # waits a few seconds for the whole response.
    deadline = asyncio.get_running_loop().time() + settings.command_timeout_seconds

    try:
        async with asyncio.timeout_at(deadline):
            expected_token = await get_token_provider()()
    except TimeoutError:
        logger.warning("Timed out loading the Slack token")
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"error": "token_unavailable"},
        )
    except RandomizerError as exc:
        logger.error("Failed to load the Slack token: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "token_unavailable"},
        )

    provided_token = form.get("token", "")
    if not provided_token or not hmac.compare_digest(
        provided_token.encode("utf-8"), expected_token.encode("utf-8")
    ):
        logger.warning("Rejected slash command with an invalid token")
        return JSONResponse(
            status_code=status.HTTP_403_FORBIDDEN,
            content={"error": "invalid_token"},
        )

    app = App(form.get("command") or settings.command_name, get_store_factory()(team_id))
    args = form.get("text", "").split()

    try:
        async with asyncio.timeout_at(deadline):
            result = await app.main(args)
    except RandomizerError as exc:
        logger.warning("Command failed: %s", exc)
        return _reply(exc.help_text, in_channel=False)
    except TimeoutError:
        logger.warning("Timed out running the command")
        return _reply(TIMEOUT_HELP_TEXT, in_channel=False)
    except Exception:
        logger.exception("Command crashed")
        return _reply(DEFAULT_HELP_TEXT, in_channel=False)

    logger.info("Command completed with %s result", result.kind.value)
    return _reply(result.message, in_channel=result.in_channel)
