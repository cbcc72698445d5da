"""
Request orchestrator: binds a query to its location and its categories.

Location resolution always finishes before any category starts. Categories
then run concurrently, each on its own session, and a failure in one is
reported against that category without affecting the others.
"""

import asyncio
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from city_explorer.config import settings
from city_explorer.data.cache import CacheAsideEngine, KeyedLocks
from city_explorer.data.models import CachedRecord, Location
from city_explorer.data.repository import LocationRepository
from city_explorer.exceptions import CityExplorerError, UnknownCategoryError
from city_explorer.logging_config import get_logger
from city_explorer.pipeline.categories import Category, build_categories
from city_explorer.pipeline.fetcher import CategoryFetcher
from city_explorer.pipeline.locations import LocationResolver
from city_explorer.providers import GeocodingProvider, LocationLike

logger = get_logger(__name__)

GENERIC_ERROR = "Sorry something went wrong"


@dataclass
class CategoryOutcome:
    """Result of one category inside a multi-category request."""

    category: str
    ok: bool
    data: list[dict[str, Any]] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class SearchResult:
    location: Location
    categories: dict[str, CategoryOutcome]


class RequestOrchestrator:
    """
    Entry point for the HTTP layer.

    Args:
        session_factory: Opens one session per unit of work.
        categories: Category descriptors keyed by name.
        geocoder: Provider used for unseen search text.
        locks: Shared per-key lock registry; ``None`` turns off refetch
            serialisation.
        clock: Epoch-seconds clock for staleness and ``created_at``.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        categories: dict[str, Category],
        geocoder: GeocodingProvider,
        locks: KeyedLocks | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.session_factory = session_factory
        self.categories = categories
        self.geocoder = geocoder
        self.locks = locks
        self.clock = clock

    @classmethod
    def from_settings(
        cls,
        session_factory: async_sessionmaker[AsyncSession],
        client: httpx.AsyncClient | None = None,
    ) -> "RequestOrchestrator":
        return cls(
            session_factory=session_factory,
            categories=build_categories(client),
            geocoder=GeocodingProvider(client),
            locks=KeyedLocks() if settings.cache.serialize_refetch else None,
        )

    async def resolve_location(self, search_query: str) -> Location:
        async with self.session_factory() as session:
            resolver = LocationResolver(LocationRepository(session), self.geocoder, self.locks)
            return await resolver.resolve(search_query)

    async def resolve_category(self, name: str, location: LocationLike) -> list[CachedRecord]:
        """Fresh rows of one category for an already resolved location."""
        category = self.get_category(name)
        async with self.session_factory() as session:
            repository = LocationRepository(session)
            engine = CacheAsideEngine(repository, clock=self.clock, locks=self.locks)
            fetcher = CategoryFetcher(category, repository, clock=self.clock)
            return await engine.resolve(category, location.id, lambda: fetcher.fetch(location))

    async def resolve_all(
        self,
        search_query: str,
        categories: Iterable[str] | None = None,
    ) -> SearchResult:
        """
        Resolve the location, then every requested category concurrently.

        A location failure fails the whole request. Category failures are
        captured per category.
        """
        names = list(categories) if categories is not None else list(self.categories)
        for name in names:
            self.get_category(name)

        location = await self.resolve_location(search_query)
        outcomes = await asyncio.gather(*(self._isolated(name, location) for name in names))
        return SearchResult(location=location, categories={o.category: o for o in outcomes})

    def get_category(self, name: str) -> Category:
        try:
            return self.categories[name]
        except KeyError:
            raise UnknownCategoryError(name) from None

    async def _isolated(self, name: str, location: Location) -> CategoryOutcome:
        try:
            rows = await self.resolve_category(name, location)
        except CityExplorerError as e:
            logger.error("Category %s failed for location %s: %s", name, location.id, e.message)
            return CategoryOutcome(category=name, ok=False, error=GENERIC_ERROR)
        except Exception:
            logger.exception("Unexpected failure in category %s for location %s", name, location.id)
            return CategoryOutcome(category=name, ok=False, error=GENERIC_ERROR)
        return CategoryOutcome(category=name, ok=True, data=[row.to_dict() for row in rows])
