"""
Weather provider: daily forecast summaries for a coordinate pair.
Source: Dark Sky forecast API
"""

from datetime import datetime, timezone
from typing import Any

from city_explorer.providers.base import BaseProvider, LocationLike, format_date


class WeatherProvider(BaseProvider):
    NAME = "weather"

    async def fetch(self, location: LocationLike) -> list[dict[str, Any]]:
        url = (
            f"{self.config.weather_url.rstrip('/')}/forecast/"
            f"{self.config.weather_api_key or ''}/{location.latitude},{location.longitude}"
        )
        payload = await self.get_json(url)
        return self.items_at(payload, "daily", "data")

    def parse(self, item: dict[str, Any]) -> dict[str, Any]:
        # ``time`` is unix seconds; rendered in UTC
        day = datetime.fromtimestamp(int(item["time"]), tz=timezone.utc)
        return {
            "forecast": item["summary"],
            "time": format_date(day),
        }
