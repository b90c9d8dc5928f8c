"""Group store protocol."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class GroupStore(Protocol):
    """Persistence for named groups of options."""

    async def list(self) -> list[str]:
        """Return the names of all saved groups, sorted.

        An empty store returns an empty list rather than raising.
        """
        ...

    async def get(self, group: str) -> list[str]:
        """Return the options in the named group, in saved order.

        A group that doesn't exist returns an empty list rather than raising.
        """
        ...

    async def put(self, group: str, options: Sequence[str]) -> None:
        """Save options under the group name, replacing any previous group."""
        ...

    async def delete(self, group: str) -> bool:
        """Ensure the group no longer exists, and report whether it did."""
        ...


# Maps a partition key (a Slack team ID) to the store for that partition.
StoreFactory = Callable[[str], GroupStore]
