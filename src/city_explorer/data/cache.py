"""
Cache-aside engine over the relational store.

One lookup protocol shared by every cached category:

    rows = select_by_location_id(table, location_id)
    no rows                      -> Miss
    now - rows[0].created_at > W -> Stale(rows)   (W = staleness window)
    otherwise                    -> Hit(rows)

``lookup`` only classifies. ``resolve`` acts on the classification: a Hit
is returned as-is, a Miss calls the supplied fetch coroutine, a Stale
deletes every row for ``(table, location_id)`` first and then fetches.
Expired rows are never returned.

Refetches are serialised per ``(table, location_id)`` inside the process
so two requests that see the same stale rows do not both delete and
refetch. Across processes the race remains.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable, Hashable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Union

from city_explorer.data.models import CachedRecord
from city_explorer.data.repository import LocationRepository
from city_explorer.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CacheTable:
    """Table identity plus how long its rows stay fresh."""

    name: str
    model: type[CachedRecord]
    staleness_seconds: float


# --- Lookup results ---


@dataclass(frozen=True)
class Hit:
    rows: list[Any]


@dataclass(frozen=True)
class Miss:
    pass


@dataclass(frozen=True)
class Stale:
    rows: list[Any]

    @property
    def created_at(self) -> float:
        return self.rows[0].created_at


CacheResult = Union[Hit, Miss, Stale]


class KeyedLocks:
    """
    Registry of asyncio locks keyed by arbitrary hashables.

    A lock lives only while some coroutine holds or waits on it, so the
    registry does not grow with the number of keys ever seen.
    """

    def __init__(self) -> None:
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._users: dict[Hashable, int] = {}

    @asynccontextmanager
    async def hold(self, key: Hashable) -> AsyncIterator[None]:
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._users[key] = self._users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]

    @property
    def size(self) -> int:
        """Keys currently held or waited on."""
        return len(self._locks)


@dataclass
class CacheAsideEngine:
    """
    Hit / miss / stale decisions for one store session.

    Args:
        repository: Store adapter bound to the current session.
        clock: Returns "now" in epoch seconds. Injected for tests.
        locks: Shared per-key lock registry. ``None`` disables refetch
            serialisation.
    """

    repository: LocationRepository
    clock: Callable[[], float] = time.time
    locks: KeyedLocks | None = field(default=None)

    async def lookup(self, table: CacheTable, location_id: int) -> CacheResult:
        rows = await self.repository.select_by_location_id(table.model, location_id)
        if not rows:
            return Miss()
        age = self.clock() - rows[0].created_at
        if age > table.staleness_seconds:
            return Stale(rows)
        return Hit(rows)

    async def resolve(
        self,
        table: CacheTable,
        location_id: int,
        on_miss: Callable[[], Awaitable[list[Any]]],
    ) -> list[Any]:
        """Return fresh rows for ``(table, location_id)``, refetching when needed."""
        result = await self.lookup(table, location_id)
        if isinstance(result, Hit):
            logger.info("Cache HIT | %s | location=%s | rows=%d", table.name, location_id, len(result.rows))
            return result.rows

        if self.locks is None:
            return await self._refill(table, location_id, result, on_miss)

        async with self.locks.hold((table.name, location_id)):
            # Another request may have refilled the rows while we waited
            result = await self.lookup(table, location_id)
            if isinstance(result, Hit):
                logger.info("Cache HIT after wait | %s | location=%s", table.name, location_id)
                return result.rows
            return await self._refill(table, location_id, result, on_miss)

    async def _refill(
        self,
        table: CacheTable,
        location_id: int,
        result: CacheResult,
        on_miss: Callable[[], Awaitable[list[Any]]],
    ) -> list[Any]:
        if isinstance(result, Stale):
            age = self.clock() - result.created_at
            logger.info(
                "Cache STALE | %s | location=%s | age=%.1fs > %.1fs",
                table.name, location_id, age, table.staleness_seconds,
            )
            await self.repository.delete_by_location_id(table.model, location_id)
        else:
            logger.info("Cache MISS | %s | location=%s", table.name, location_id)
        return await on_miss()
