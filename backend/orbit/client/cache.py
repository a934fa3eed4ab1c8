"""In-memory query cache with coarse, namespace-wide invalidation."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)

CacheKey = tuple[str, ...]


class QueryCache:
    """Holds query results until a mutation invalidates their namespace.

    Keys are tuples whose first element is the namespace, e.g.
    ``("reflection", "getAll")``. There is no time-based expiry.
    """

    def __init__(self) -> None:
        self._entries: dict[CacheKey, Any] = {}
        self._generation = 0

    @property
    def generation(self) -> int:
        """Incremented on every invalidation."""
        return self._generation

    def get(self, key: CacheKey) -> Any | None:
        return self._entries.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    async def fetch(self, key: CacheKey, loader: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached value for *key*, loading and storing it on a miss.

        A loaded value is discarded instead of stored if an invalidation ran
        while the loader was awaiting, since it may predate that mutation.
        """
        if key in self._entries:
            return self._entries[key]

        generation = self._generation
        value = await loader()
        if generation == self._generation:
            self._entries[key] = value
        else:
            logger.debug("Dropping stale load for %s (invalidated mid-flight)", key)
        return value

    def invalidate(self, namespace: str | None = None) -> None:
        """Drop every entry in *namespace*, or everything when it is None."""
        if namespace is None:
            self._entries.clear()
        else:
            for key in [k for k in self._entries if k[0] == namespace]:
                del self._entries[key]
        self._generation += 1
        logger.debug("Invalidated cache namespace %s", namespace or "*")
