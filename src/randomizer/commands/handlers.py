"""Command handlers.

Each handler takes the app and a parsed request and returns a Result, or
raises a RandomizerError whose help text can be shown to the user.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from randomizer.commands.types import Operation, Request, Result, ResultKind
from randomizer.errors import RandomizerError, StoreError, UsageError

if TYPE_CHECKING:
    from randomizer.commands.service import App

logger = logging.getLogger(__name__)

Handler = Callable[["App", Request], Awaitable[Result]]

_RESERVED_PREFIXES = ("/", "+", "-")


@contextmanager
def _store_errors(action: str) -> Iterator[None]:
    try:
        yield
    except RandomizerError:
        raise
    except Exception as exc:
        raise StoreError(f"{action}: {exc}") from exc


def _dedupe(options: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for option in options:
        if option not in seen:
            seen.add(option)
            result.append(option)
    return result


def _bullets(items: Iterable[str]) -> str:
    return "\n".join(f"• {item}" for item in items)


def _join_bold(items: list[str]) -> str:
    bold = [f"*{item}*" for item in items]
    if len(bold) <= 2:
        return " and ".join(bold)
    return ", ".join(bold[:-1]) + f", and {bold[-1]}"


def validate_group_name(name: str) -> None:
    """Reject names that the parser or the selection syntax would shadow."""
    if name == "help":
        raise UsageError(
            'group name "help" is reserved',
            help_text='Whoops, "help" is reserved, so you can\'t use it as a group name.',
        )
    if name.startswith(_RESERVED_PREFIXES):
        raise UsageError(
            f"group name {name!r} starts with a reserved character",
            help_text=(
                f'Whoops, group names can\'t start with "{name[0]}", '
                "since that looks like a flag or an option filter."
            ),
        )


async def show_help(app: App, request: Request) -> Result:
    name = app.name
    text = (
        "Hi there! I pick things at random so you don't have to.\n\n"
        "*Randomize a list:*\n"
        f"• `{name} Alice Bob Carol` picks one option.\n"
        f"• `{name} /n 2 Alice Bob Carol` picks two.\n"
        f"• `{name} /all Alice Bob Carol` shuffles the whole list.\n\n"
        "*Save groups for later:*\n"
        f"• `{name} /save lunch Tacos Pizza Salad` saves a group.\n"
        f"• `{name} lunch` picks from a saved group. Mix groups and options, "
        "use `-Pizza` to leave an option out, or `+lunch` to add the word itself.\n"
        f"• `{name} /list` lists your groups, `{name} /show lunch` shows one, "
        f"and `{name} /delete lunch` removes it."
    )
    return Result(ResultKind.HELP, text)


def _selection_mode(args: list[str]) -> tuple[int | None, list[str]]:
    """Split leading selection modifiers from the options.

    Returns the number of winners to pick (None to shuffle everything) and
    the remaining arguments.
    """
    if args and args[0] == "/all":
        return None, args[1:]
    if args and args[0] == "/n":
        try:
            count = int(args[1]) if len(args) > 1 and args[1].isascii() else 0
        except ValueError:
            count = 0
        if count < 1:
            raise UsageError(
                '"/n" needs a positive number of options to pick',
                help_text='Whoops, "/n" needs a number of options to pick, like `/n 2`.',
            )
        return count, args[2:]
    return 1, args


async def _expand_options(app: App, args: list[str]) -> list[str]:
    if not args:
        return []
    with _store_errors("listing groups for selection"):
        groups = set(await app.store.list())

    options: list[str] = []
    removed: set[str] = set()
    for arg in args:
        if arg.startswith("-") and len(arg) > 1:
            removed.add(arg[1:])
            options = [option for option in options if option != arg[1:]]
            continue
        if arg.startswith("+") and len(arg) > 1:
            candidates = [arg[1:]]
        elif arg in groups:
            with _store_errors(f"getting group {arg!r} for selection"):
                candidates = await app.store.get(arg)
        else:
            candidates = [arg]
        options.extend(c for c in candidates if c not in removed)
    return _dedupe(options)


async def make_selection(app: App, request: Request) -> Result:
    count, args = _selection_mode(list(request.args))
    options = await _expand_options(app, args)
    if len(options) < 2:
        raise UsageError(
            f"selection needs at least two options, got {len(options)}",
            help_text="Whoops, I need at least two options to randomize!",
        )
    if count is not None and count > len(options):
        raise UsageError(
            f"asked to pick {count} of {len(options)} options",
            help_text=f"Whoops, I can't pick {count} options from a list of {len(options)}!",
        )

    app.shuffle(options)
    if count is None:
        numbered = "\n".join(f"{i}. {option}" for i, option in enumerate(options, start=1))
        return Result(
            ResultKind.SHUFFLED, f"Here's your shuffled list:\n{numbered}", tuple(options)
        )
    if count == 1:
        message = f"The winner is... *{options[0]}*!"
    else:
        message = f"The winners are... {_join_bold(options[:count])}!"
    return Result(ResultKind.SELECTION, message, tuple(options))


async def list_groups(app: App, request: Request) -> Result:
    with _store_errors("listing groups"):
        names = await app.store.list()
    if not names:
        return Result(
            ResultKind.LISTED,
            f"You don't have any saved groups yet. Try `{app.name} /save` to make one!",
        )
    return Result(ResultKind.LISTED, f"Your saved groups are:\n{_bullets(names)}", tuple(names))


async def show_group(app: App, request: Request) -> Result:
    name = request.operand
    with _store_errors(f"getting group {name!r}"):
        options = await app.store.get(name)
    if not options:
        raise UsageError(
            f"group {name!r} not found",
            help_text=f'Whoops, I couldn\'t find a group named "{name}".',
        )
    return Result(
        ResultKind.SHOWED,
        f"The *{name}* group has these options:\n{_bullets(options)}",
        tuple(options),
    )


async def save_group(app: App, request: Request) -> Result:
    name = request.operand
    validate_group_name(name)
    options = _dedupe(request.args)
    if len(options) < 2:
        raise UsageError(
            f"group {name!r} needs at least two options, got {len(options)}",
            help_text="Whoops, a group needs at least two options so I can pick from it!",
        )
    with _store_errors(f"saving group {name!r}"):
        await app.store.put(name, options)
    logger.info("Saved group %s with %d options", name, len(options))
    return Result(
        ResultKind.SAVED,
        f"Done! The *{name}* group now has these options:\n{_bullets(options)}",
        tuple(options),
    )


async def delete_group(app: App, request: Request) -> Result:
    name = request.operand
    with _store_errors(f"deleting group {name!r}"):
        existed = await app.store.delete(name)
    if not existed:
        return Result(
            ResultKind.DELETED,
            f"The *{name}* group didn't exist, so there was nothing to delete.",
        )
    logger.info("Deleted group %s", name)
    return Result(ResultKind.DELETED, f"Done! The *{name}* group is gone.")


HANDLERS: dict[Operation, Handler] = {
    Operation.HELP: show_help,
    Operation.SELECT: make_selection,
    Operation.LIST: list_groups,
    Operation.SHOW: show_group,
    Operation.SAVE: save_group,
    Operation.DELETE: delete_group,
}


def check_handlers(handlers: dict[Operation, Handler]) -> None:
    missing = set(Operation) - set(handlers)
    if missing:
        raise RuntimeError(f"no handler for operations: {sorted(map(str, missing))}")


check_handlers(HANDLERS)
