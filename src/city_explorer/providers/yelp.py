"""
Business review provider: nearby businesses with ratings.
Source: Yelp Fusion business search
"""

from typing import Any

from city_explorer.providers.base import BaseProvider, LocationLike


class YelpProvider(BaseProvider):
    NAME = "yelp"

    async def fetch(self, location: LocationLike) -> list[dict[str, Any]]:
        payload = await self.get_json(
            f"{self.config.yelp_url.rstrip('/')}/v3/businesses/search",
            params={"latitude": location.latitude, "longitude": location.longitude},
            headers={"Authorization": f"Bearer {self.config.yelp_api_key or ''}"},
        )
        return self.items_at(payload, "businesses")

    def parse(self, item: dict[str, Any]) -> dict[str, Any]:
        return {
            "name": item["name"],
            "rating": item.get("rating"),
            "price": item.get("price"),
            "url": item.get("url"),
            "image_url": item.get("image_url"),
        }
