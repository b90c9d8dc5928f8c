"""In-memory group store for tests and local runs."""

from __future__ import annotations

from collections.abc import Sequence


class MemoryStore:
    def __init__(self, groups: dict[str, list[str]] | None = None) -> None:
        self._groups: dict[str, list[str]] = groups if groups is not None else {}

    async def list(self) -> list[str]:
        return sorted(self._groups)

    async def get(self, group: str) -> list[str]:
        return list(self._groups.get(group, []))

    async def put(self, group: str, options: Sequence[str]) -> None:
        self._groups[group] = list(options)

    async def delete(self, group: str) -> bool:
        return self._groups.pop(group, None) is not None


class MemoryStoreFactory:
    """Hands out one shared in-memory store per partition."""

    def __init__(self) -> None:
        self._partitions: dict[str, dict[str, list[str]]] = {}

    def __call__(self, partition: str) -> MemoryStore:
        return MemoryStore(self._partitions.setdefault(partition, {}))
