"""Reflection access facade.

Single client-side surface for reading and mutating reflections. Reads of
the full collection go through a :class:`QueryCache`; every successful
mutation invalidates the ``reflection`` namespace exactly once. Errors from
the transport propagate unchanged.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from orbit.client.cache import QueryCache
from orbit.client.transport import Transport
from orbit.models.reflection import DeleteResult, MoodSample, ReflectionRead

logger = logging.getLogger(__name__)

NAMESPACE = "reflection"
DEFAULT_TREND_DAYS = 30

_LIST_KEY = (NAMESPACE, "getAll")

# snake_case argument names that differ from the wire field names
_WIRE_FIELDS = {
    "journal_entry": "journalEntry",
}


class ReflectionClient:
    def __init__(self, transport: Transport, cache: QueryCache | None = None) -> None:
        self._transport = transport
        self._cache = cache if cache is not None else QueryCache()

    @property
    def cache(self) -> QueryCache:
        return self._cache

    async def _call(self, procedure: str, payload: dict[str, Any] | None = None) -> Any:
        return await self._transport.call(f"{NAMESPACE}.{procedure}", payload)

    def _invalidate(self) -> None:
        self._cache.invalidate(NAMESPACE)

    # ── queries ──────────────────────────────────────────────────

    async def list(self) -> list[ReflectionRead]:
        """All of the owner's reflections, newest first, served from cache when warm."""

        async def load() -> list[ReflectionRead]:
            rows = await self._call("getAll")
            return [ReflectionRead.model_validate(r) for r in rows]

        # Copies, so callers cannot edit what later list() calls serve
        return [r.model_copy(deep=True) for r in await self._cache.fetch(_LIST_KEY, load)]

    async def get_by_id(self, reflection_id: str) -> ReflectionRead:
        data = await self._call("getById", {"id": reflection_id})
        return ReflectionRead.model_validate(data)

    async def get_by_date_range(self, start: datetime, end: datetime) -> list[ReflectionRead]:
        """Reflections created within [start, end], inclusive on both ends."""
        rows = await self._call("getByDateRange", {"startDate": start, "endDate": end})
        return [ReflectionRead.model_validate(r) for r in rows]

    async def get_mood_trends(self, days: int = DEFAULT_TREND_DAYS) -> list[MoodSample]:
        """Mood/energy samples from the last *days* days, oldest first."""
        end = datetime.now(timezone.utc)
        start = end - timedelta(days=days)
        rows = await self._call("getMoodTrends", {"startDate": start, "endDate": end})
        return [MoodSample.model_validate(r) for r in rows]

    # ── mutations ────────────────────────────────────────────────

    async def create(
        self,
        wins: str,
        challenges: str,
        journal_entry: str,
        mood: int,
        energy: int,
        tags: list[str] | None = None,
    ) -> ReflectionRead:
        data = await self._call(
            "create",
            {
                "wins": wins,
                "challenges": challenges,
                "journalEntry": journal_entry,
                "mood": mood,
                "energy": energy,
                "tags": list(tags) if tags else [],
            },
        )
        self._invalidate()
        reflection = ReflectionRead.model_validate(data)
        logger.info("Created reflection %s", reflection.id)
        return reflection

    async def update(self, reflection_id: str, **fields: Any) -> ReflectionRead:
        """Replace only the given fields, e.g. ``update(rid, mood=5, tags=["calm"])``."""
        payload = {_WIRE_FIELDS.get(name, name): value for name, value in fields.items()}
        payload["id"] = reflection_id
        data = await self._call("update", payload)
        self._invalidate()
        return ReflectionRead.model_validate(data)

    async def remove(self, reflection_id: str) -> DeleteResult:
        data = await self._call("delete", {"id": reflection_id})
        self._invalidate()
        logger.info("Deleted reflection %s", reflection_id)
        return DeleteResult.model_validate(data)
