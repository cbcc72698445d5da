"""
Geocoding provider: turns free search text into coordinates.
Source: Google Geocoding API
"""

from typing import Any

from city_explorer.providers.base import HttpProvider
from city_explorer.logging_config import get_logger

logger = get_logger(__name__)


class GeocodingProvider(HttpProvider):
    """
    Resolves a search query to candidate places, best match first.

    Not a category provider: its input is search text, not a resolved
    location, and its rows never expire.
    """

    NAME = "geocode"

    async def geocode(self, search_query: str) -> list[dict[str, Any]]:
        payload = await self.get_json(
            self.config.geocode_url,
            params={"address": search_query, "key": self.config.geocode_api_key or ""},
        )
        results = self.items_at(payload, "results")
        logger.info("Geocoded '%s' | results=%d", search_query, len(results))
        return results

    def parse(self, item: dict[str, Any]) -> dict[str, Any]:
        point = item["geometry"]["location"]
        return {
            "formatted_query": item["formatted_address"],
            "latitude": float(point["lat"]),
            "longitude": float(point["lng"]),
        }
