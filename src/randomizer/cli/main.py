"""Click CLI group: run commands locally and check token configuration."""

from __future__ import annotations

import asyncio
import json
import sys

import click

from randomizer.auth import token_provider_from_settings
from randomizer.commands.service import App
from randomizer.config import get_settings
from randomizer.errors import RandomizerError
from randomizer.logging import configure_logging
from randomizer.store.factory import store_factory_from_settings


@click.group()
@click.option("--log-level", type=str, default=None, help="Override LOG_LEVEL.")
def cli(log_level: str | None) -> None:
    """Randomizer CLI."""
    configure_logging(log_level or get_settings().log_level)


@cli.command(context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False})
@click.option(
    "--partition",
    type=str,
    default="local",
    show_default=True,
    help="Store partition to use, like a Slack team ID.",
)
@click.option("--json", "json_output", is_flag=True, help="Print structured JSON output.")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def run(partition: str, json_output: bool, args: tuple[str, ...]) -> None:
    """Run one randomizer command, e.g. `randomizer run -- /save lunch A B`."""
    settings = get_settings()
    store = store_factory_from_settings(settings)(partition)
    app = App(settings.command_name, store)
    try:
        result = asyncio.run(app.main(list(args)))
    except RandomizerError as exc:
        if json_output:
            click.echo(json.dumps({"ok": False, "error": exc.help_text, "cause": str(exc)}))
        else:
            click.echo(exc.help_text, err=True)
        sys.exit(1)

    if json_output:
        payload = {
            "ok": True,
            "kind": result.kind.value,
            "message": result.message,
            "options": list(result.options),
        }
        click.echo(json.dumps(payload))
        return
    click.echo(result.message)


@cli.command("check-token")
def check_token() -> None:
    """Resolve the configured Slack token once, without printing it."""
    settings = get_settings()
    try:
        provider = token_provider_from_settings(settings)
        token = asyncio.run(provider())
    except RandomizerError as exc:
        click.echo(f"token unavailable: {exc}", err=True)
        sys.exit(1)
    click.echo(f"source: {provider.source}")
    click.echo(f"length: {len(token)}")
