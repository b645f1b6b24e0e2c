"""Cached views of server state with prefix invalidation."""

from collections.abc import Awaitable, Callable, Hashable
from typing import Any

CacheKey = tuple[Hashable, ...]


class ViewCache:
    """Remembers fetched views until they are invalidated.

    Invalidating a key also drops every key it prefixes, so
    ``("conversations",)`` covers ``("conversations", id, "messages")``.
    """

    def __init__(self):
        self._entries: dict[CacheKey, Any] = {}

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    async def get(self, key: CacheKey, fetch: Callable[[], Awaitable[Any]]) -> Any:
        if key not in self._entries:
            self._entries[key] = await fetch()
        return self._entries[key]

    def invalidate(self, key: CacheKey) -> None:
        for cached in [k for k in self._entries if k[: len(key)] == key]:
            del self._entries[cached]

    def clear(self) -> None:
        self._entries.clear()
