"""Command argument parsing."""

from collections.abc import Sequence

from randomizer.commands.types import Operation, Request
from randomizer.errors import MissingOperandError

_GROUP_FLAGS = {
    "/show": Operation.SHOW,
    "/save": Operation.SAVE,
    "/delete": Operation.DELETE,
}


def parse_args(args: Sequence[str]) -> Request:
    """Turn the raw tokens of a command into a typed request.

    Raises:
        MissingOperandError: a group flag was given without a group name.
    """
    args = tuple(args)

    # The flag syntax for help is accepted, but users won't know it in advance.
    # The save handler blocks "help" as a group name so this can't shadow one.
    if not args or args[0] == "/help" or (len(args) == 1 and args[0] == "help"):
        return Request(Operation.HELP, "", args)

    if args[0] == "/list":
        return Request(Operation.LIST, "", args)

    operation = _GROUP_FLAGS.get(args[0])
    if operation is None:
        # Unknown leading tokens are options to randomize, even if they look
        # like flags. Flag-like group names are rejected on save, so a new
        # flag can never hide an existing group.
        return Request(Operation.SELECT, "", args)

    if len(args) < 2:
        raise MissingOperandError(args[0])
    return Request(operation, args[1], args[2:])
