"""
Movies provider: films currently in theatres.
Source: TMDB ``movie/now_playing``

The endpoint takes no location; every location receives the same list.
"""

from typing import Any

from city_explorer.providers.base import BaseProvider, LocationLike


class MoviesProvider(BaseProvider):
    NAME = "movies"

    async def fetch(self, location: LocationLike) -> list[dict[str, Any]]:
        payload = await self.get_json(
            f"{self.config.movie_url.rstrip('/')}/3/movie/now_playing",
            params={
                "api_key": self.config.movie_api_key or "",
                "language": "en-US",
                "page": 1,
            },
        )
        return self.items_at(payload, "results")

    def parse(self, item: dict[str, Any]) -> dict[str, Any]:
        poster = item.get("poster_path")
        return {
            "title": item["title"],
            "overview": item.get("overview"),
            "image_url": f"{self.config.movie_image_base}{poster}" if poster else None,
            "released_on": item.get("release_date"),
            "total_votes": item.get("vote_count"),
            "average_votes": item.get("vote_average"),
            "popularity": item.get("popularity"),
        }
