"""
Events provider: upcoming events around an address.
Source: Eventbrite event search
"""

from datetime import datetime
from typing import Any

from city_explorer.providers.base import BaseProvider, LocationLike, format_date


class EventsProvider(BaseProvider):
    NAME = "events"

    async def fetch(self, location: LocationLike) -> list[dict[str, Any]]:
        payload = await self.get_json(
            f"{self.config.eventbrite_url.rstrip('/')}/v3/events/search",
            params={
                "token": self.config.eventbrite_api_key or "",
                "location.address": location.formatted_query or "",
            },
        )
        return self.items_at(payload, "events")

    def parse(self, item: dict[str, Any]) -> dict[str, Any]:
        starts = datetime.fromisoformat(item["start"]["local"])
        return {
            "link": item["url"],
            "name": item["name"]["text"],
            "event_date": format_date(starts),
            "summary": item.get("summary"),
        }
