"""
Location resolution: the bootstrap every category depends on.

Search text is looked up in the store first; only unseen text is sent to
the geocoder. Locations never expire, so a stored row is always a hit.
"""

from contextlib import nullcontext

from city_explorer.data.cache import KeyedLocks
from city_explorer.data.models import Location
from city_explorer.data.repository import LocationRepository
from city_explorer.exceptions import InvalidQueryError, NoLocationFound, ProviderPayloadError
from city_explorer.logging_config import get_logger
from city_explorer.providers import GeocodingProvider

logger = get_logger(__name__)


class LocationResolver:
    """
    Resolve free search text to a persisted Location.

    With ``locks`` set, lookup-then-insert for one query runs under a
    per-query lock so concurrent first requests geocode once.
    """

    def __init__(
        self,
        repository: LocationRepository,
        geocoder: GeocodingProvider,
        locks: KeyedLocks | None = None,
    ):
        self.repository = repository
        self.geocoder = geocoder
        self.locks = locks

    async def resolve(self, search_query: str) -> Location:
        """
        Return the Location stored for ``search_query``, geocoding and
        persisting it on first sight.

        Raises:
            InvalidQueryError: Empty or whitespace-only query.
            NoLocationFound: The geocoder has no result for the query.
            ProviderError: The geocoder call failed.
            StoreError: The store call failed.
        """
        query = (search_query or "").strip()
        if not query:
            raise InvalidQueryError(search_query)

        guard = self.locks.hold((Location.__tablename__, query)) if self.locks is not None else nullcontext()
        async with guard:
            rows = await self.repository.select_by_search_query(query)
            if rows:
                logger.info("Location HIT | '%s' -> id=%s", query, rows[0].id)
                return rows[0]
            return await self._geocode_and_store(query)

    async def _geocode_and_store(self, query: str) -> Location:
        logger.info("Location MISS | '%s' | geocoding", query)
        results = await self.geocoder.geocode(query)
        if not results:
            raise NoLocationFound(query)

        try:
            fields = self.geocoder.parse(results[0])
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderPayloadError(
                message="Malformed geocoding result",
                details={"search_query": query, "error": repr(e)},
            ) from e

        location = Location(search_query=query, **fields)
        await self.repository.insert(location)
        logger.info("Location stored | '%s' -> id=%s (%s)", query, location.id, location.formatted_query)
        return location
