"""Typed requests and results for randomizer commands."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Operation(Enum):
    HELP = "help"
    SELECT = "select"
    LIST = "list"
    SHOW = "show"
    SAVE = "save"
    DELETE = "delete"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Request:
    """A single user request, created from raw user input."""

    operation: Operation
    operand: str = ""
    args: tuple[str, ...] = ()


class ResultKind(Enum):
    HELP = "help"
    SELECTION = "selection"
    SHUFFLED = "shuffled"
    LISTED = "listed"
    SHOWED = "showed"
    SAVED = "saved"
    DELETED = "deleted"


_IN_CHANNEL_KINDS = frozenset({ResultKind.SELECTION, ResultKind.SHUFFLED})


@dataclass(frozen=True, slots=True)
class Result:
    kind: ResultKind
    message: str
    options: tuple[str, ...] = field(default=())

    @property
    def in_channel(self) -> bool:
        """Whether the result should be shared with everyone in the channel."""
        return self.kind in _IN_CHANNEL_KINDS
