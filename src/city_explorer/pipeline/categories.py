"""
Category descriptors.

A category is a cache table plus the provider call that refills it and the
mapper that turns one provider item into record columns. Every cached
category goes through the same engine and fetcher; only this table differs.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import httpx

from city_explorer.config import ProviderSettings, CacheSettings, settings
from city_explorer.data.cache import CacheTable
from city_explorer.data.models import BusinessReview, CachedRecord, Event, Movie, Weather
from city_explorer.providers import (
    BaseProvider,
    EventsProvider,
    LocationLike,
    MoviesProvider,
    WeatherProvider,
    YelpProvider,
)

WEATHER = "weather"
EVENTS = "events"
MOVIES = "movies"
YELP = "yelp"

CATEGORY_NAMES = (WEATHER, EVENTS, MOVIES, YELP)


@dataclass(frozen=True)
class Category(CacheTable):
    provider_call: Callable[[LocationLike], Awaitable[list[dict[str, Any]]]]
    payload_mapper: Callable[[dict[str, Any]], dict[str, Any]]

    @classmethod
    def from_provider(cls, name: str, model, staleness_seconds: float, provider: BaseProvider) -> "Category":
        return cls(
            name=name,
            model=model,
            staleness_seconds=staleness_seconds,
            provider_call=provider.fetch,
            payload_mapper=provider.parse,
        )


def staleness_window(model: type[CachedRecord], override: float | None) -> float:
    """The configured window for ``model``, or the model's own default."""
    return override if override is not None else model.STALENESS_SECONDS


def build_categories(
    client: httpx.AsyncClient | None = None,
    providers: ProviderSettings | None = None,
    cache: CacheSettings | None = None,
) -> dict[str, Category]:
    """
    Build the four cached categories, keyed by name.

    Args:
        client: Shared HTTP client handed to every provider.
        providers: Override provider settings.
        cache: Override staleness windows. Windows left unset use the
            record type's ``STALENESS_SECONDS``.
    """
    cache = cache or settings.cache
    wiring = (
        (WEATHER, Weather, cache.weather_ttl, WeatherProvider),
        (EVENTS, Event, cache.events_ttl, EventsProvider),
        (MOVIES, Movie, cache.movies_ttl, MoviesProvider),
        (YELP, BusinessReview, cache.yelp_ttl, YelpProvider),
    )
    return {
        name: Category.from_provider(
            name, model, staleness_window(model, override), provider_cls(client, providers),
        )
        for name, model, override, provider_cls in wiring
    }
