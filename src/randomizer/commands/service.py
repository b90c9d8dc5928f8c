"""Command execution service."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable, Sequence

from randomizer.commands.handlers import HANDLERS
from randomizer.commands.request import parse_args
from randomizer.commands.types import Result
from randomizer.logging import bind_context
from randomizer.store.base import GroupStore

logger = logging.getLogger(__name__)

Shuffle = Callable[[list[str]], None]


class App:
    """A randomizer instance that accepts commands against one group store.

    ``shuffle`` permutes a list in place and defaults to ``random.shuffle``;
    tests swap in a deterministic one.
    """

    def __init__(
        self,
        name: str,
        store: GroupStore,
        *,
        shuffle: Shuffle | None = None,
    ) -> None:
        self.name = name
        self.store = store
        self.shuffle = shuffle or random.shuffle

    async def main(self, args: Sequence[str]) -> Result:
        """Run one command.

        Every error raised from here is a RandomizerError with user-friendly
        help text, apart from cancellation, which propagates unchanged.
        """
        request = parse_args(args)
        bind_context(operation=str(request.operation))
        logger.debug("Dispatching %s with %d args", request.operation, len(request.args))
        handler = HANDLERS[request.operation]
        return await handler(self, request)
