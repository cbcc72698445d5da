"""Generic category fetcher: provider call → records → store."""

import time
from collections.abc import Callable

from city_explorer.data.models import CachedRecord
from city_explorer.data.repository import LocationRepository
from city_explorer.exceptions import ProviderPayloadError
from city_explorer.logging_config import get_logger
from city_explorer.pipeline.categories import Category
from city_explorer.providers import LocationLike

logger = get_logger(__name__)


class CategoryFetcher:
    """
    Refills one category for one location.

    Every record in a batch shares one ``created_at``, which is what lets
    the cache judge a whole batch by its first row.
    """

    def __init__(
        self,
        category: Category,
        repository: LocationRepository,
        clock: Callable[[], float] = time.time,
    ):
        self.category = category
        self.repository = repository
        self.clock = clock

    async def fetch(self, location: LocationLike) -> list[CachedRecord]:
        items = await self.category.provider_call(location)
        if not items:
            logger.info("Provider returned no %s for location %s", self.category.name, location.id)
            return []

        fetched_at = self.clock()
        records = []
        for item in items:
            try:
                fields = self.category.payload_mapper(item)
            except (KeyError, TypeError, ValueError) as e:
                raise ProviderPayloadError(
                    message=f"Malformed {self.category.name} item",
                    details={"category": self.category.name, "error": repr(e)},
                ) from e
            records.append(
                self.category.model(**fields, created_at=fetched_at, location_id=location.id)
            )

        await self.repository.insert_many(records)
        logger.info("Fetched %d %s row(s) for location %s", len(records), self.category.name, location.id)
        return records
