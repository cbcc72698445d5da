"""Provider clients: geocoding, weather, events, movies, business reviews."""

from city_explorer.providers.base import BaseProvider, HttpProvider, LocationLike
from city_explorer.providers.geocoding import GeocodingProvider
from city_explorer.providers.weather import WeatherProvider
from city_explorer.providers.events import EventsProvider
from city_explorer.providers.movies import MoviesProvider
from city_explorer.providers.yelp import YelpProvider

__all__ = [
    "BaseProvider",
    "HttpProvider",
    "LocationLike",
    "GeocodingProvider",
    "WeatherProvider",
    "EventsProvider",
    "MoviesProvider",
    "YelpProvider",
]
