"""
Tests for the remote data providers.

HTTP traffic is intercepted with pytest-httpx; no real API is contacted.
"""

from datetime import datetime
from types import SimpleNamespace

import httpx
import pytest

from city_explorer.config import ProviderSettings, settings
from city_explorer.exceptions import (
    ProviderPayloadError,
    ProviderResponseError,
    ProviderTimeoutError,
)
from city_explorer.providers import (
    BaseProvider,
    EventsProvider,
    GeocodingProvider,
    HttpProvider,
    MoviesProvider,
    WeatherProvider,
    YelpProvider,
)
from city_explorer.providers.base import format_date


@pytest.fixture
def config():
    return ProviderSettings(
        geocode_api_key="geo-key",
        weather_api_key="wx-key",
        eventbrite_api_key="eb-key",
        movie_api_key="tmdb-key",
        yelp_api_key="yelp-key",
    )


@pytest.fixture
def location():
    return SimpleNamespace(id=1, formatted_query="Seattle, WA", latitude=47.66, longitude=-122.35)


# ─── Shared HTTP behaviour ──────────────────────────────────


class TestGetJson:
    """Every provider maps transport failures the same way."""

    @pytest.mark.asyncio
    async def test_timeout(self, httpx_mock, config, location):
        httpx_mock.add_exception(httpx.ReadTimeout("timed out"))
        with pytest.raises(ProviderTimeoutError) as exc_info:
            await WeatherProvider(config=config).fetch(location)
        assert exc_info.value.details["provider"] == "weather"

    @pytest.mark.asyncio
    async def test_connection_failure(self, httpx_mock, config, location):
        httpx_mock.add_exception(httpx.ConnectError("refused"))
        with pytest.raises(ProviderTimeoutError):
            await YelpProvider(config=config).fetch(location)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 404, 500, 503])
    async def test_non_success_status(self, httpx_mock, config, location, status):
        httpx_mock.add_response(status_code=status, json={"error": "nope"})
        with pytest.raises(ProviderResponseError) as exc_info:
            await EventsProvider(config=config).fetch(location)
        assert exc_info.value.details["status"] == status

    @pytest.mark.asyncio
    async def test_non_json_body(self, httpx_mock, config, location):
        httpx_mock.add_response(text="<html>maintenance</html>")
        with pytest.raises(ProviderPayloadError):
            await MoviesProvider(config=config).fetch(location)

    @pytest.mark.asyncio
    async def test_json_array_body(self, httpx_mock, config, location):
        httpx_mock.add_response(json=[1, 2, 3])
        with pytest.raises(ProviderPayloadError):
            await MoviesProvider(config=config).fetch(location)

    @pytest.mark.asyncio
    async def test_missing_item_list(self, httpx_mock, config, location):
        httpx_mock.add_response(json={"daily": {}})
        with pytest.raises(ProviderPayloadError) as exc_info:
            await WeatherProvider(config=config).fetch(location)
        assert exc_info.value.details["path"] == ["daily", "data"]

    @pytest.mark.asyncio
    async def test_item_list_wrong_type(self, httpx_mock, config, location):
        httpx_mock.add_response(json={"businesses": "none"})
        with pytest.raises(ProviderPayloadError):
            await YelpProvider(config=config).fetch(location)

    @pytest.mark.asyncio
    async def test_shared_client_is_used(self, httpx_mock, config, location, yelp_payload):
        httpx_mock.add_response(json=yelp_payload)
        async with httpx.AsyncClient() as client:
            items = await YelpProvider(client, config).fetch(location)
            assert not client.is_closed
        assert len(items) == 1


# ─── Geocoding ──────────────────────────────────────────────


class TestGeocodingProvider:

    @pytest.mark.asyncio
    async def test_geocode_request(self, httpx_mock, config, geocode_payload):
        httpx_mock.add_response(json=geocode_payload)

        results = await GeocodingProvider(config=config).geocode("98103")
        assert len(results) == 2

        request = httpx_mock.get_requests()[0]
        assert request.url.params["address"] == "98103"
        assert request.url.params["key"] == "geo-key"

    @pytest.mark.asyncio
    async def test_zero_results(self, httpx_mock, config):
        httpx_mock.add_response(json={"results": [], "status": "ZERO_RESULTS"})
        assert await GeocodingProvider(config=config).geocode("zzzz") == []

    def test_parse_first_result(self, geocode_payload):
        assert GeocodingProvider().parse(geocode_payload["results"][0]) == {
            "formatted_query": "Seattle, WA",
            "latitude": 47.66,
            "longitude": -122.35,
        }

    def test_parse_missing_geometry(self):
        with pytest.raises(KeyError):
            GeocodingProvider().parse({"formatted_address": "Nowhere"})

    def test_not_a_category_provider(self):
        """The geocoder takes search text; it has no per-location fetch."""
        assert not issubclass(GeocodingProvider, BaseProvider)
        assert issubclass(GeocodingProvider, HttpProvider)
        assert not hasattr(GeocodingProvider(), "fetch")


# ─── Weather ────────────────────────────────────────────────


class TestWeatherProvider:

    @pytest.mark.asyncio
    async def test_fetch_url(self, httpx_mock, config, location, weather_payload):
        httpx_mock.add_response(json=weather_payload)

        items = await WeatherProvider(config=config).fetch(location)
        assert len(items) == 3

        request = httpx_mock.get_requests()[0]
        assert request.url.host == "api.darksky.net"
        assert request.url.path == "/forecast/wx-key/47.66,-122.35"

    def test_parse(self, weather_payload):
        days = [WeatherProvider().parse(item) for item in weather_payload["daily"]["data"]]
        assert days == [
            {"forecast": "Light rain in the morning.", "time": "Mon Oct 19 2026"},
            {"forecast": "Partly cloudy throughout the day.", "time": "Tue Oct 20 2026"},
            {"forecast": "Clear throughout the day.", "time": "Wed Oct 21 2026"},
        ]


# ─── Events ─────────────────────────────────────────────────


class TestEventsProvider:

    @pytest.mark.asyncio
    async def test_fetch_params(self, httpx_mock, config, location, events_payload):
        httpx_mock.add_response(json=events_payload)

        items = await EventsProvider(config=config).fetch(location)
        assert len(items) == 1

        request = httpx_mock.get_requests()[0]
        assert request.url.path == "/v3/events/search"
        assert request.url.params["token"] == "eb-key"
        assert request.url.params["location.address"] == "Seattle, WA"

    def test_parse(self, events_payload):
        assert EventsProvider().parse(events_payload["events"][0]) == {
            "link": "https://www.eventbrite.com/e/1",
            "name": "Fremont Night Market",
            "event_date": "Sat Oct 24 2026",
            "summary": "Food trucks and music.",
        }

    def test_parse_bad_date(self):
        item = {"url": "u", "name": {"text": "n"}, "start": {"local": "soon"}}
        with pytest.raises(ValueError):
            EventsProvider().parse(item)


# ─── Movies ─────────────────────────────────────────────────


class TestMoviesProvider:

    @pytest.mark.asyncio
    async def test_fetch_ignores_location(self, httpx_mock, config, location, movies_payload):
        httpx_mock.add_response(json=movies_payload)

        await MoviesProvider(config=config).fetch(location)

        request = httpx_mock.get_requests()[0]
        assert request.url.path == "/3/movie/now_playing"
        assert dict(request.url.params) == {"api_key": "tmdb-key", "language": "en-US", "page": "1"}

    def test_parse(self, movies_payload):
        assert MoviesProvider().parse(movies_payload["results"][0]) == {
            "title": "The Long Walk",
            "overview": "A road movie.",
            "image_url": "https://image.tmdb.org/t/p/original/abc123.jpg",
            "released_on": "2026-09-12",
            "total_votes": 1200,
            "average_votes": 7.4,
            "popularity": 310.5,
        }

    def test_parse_without_poster(self, movies_payload):
        assert MoviesProvider().parse(movies_payload["results"][1])["image_url"] is None

    def test_parse_uses_injected_image_base(self, movies_payload):
        config = ProviderSettings(movie_image_base="https://cdn.example/w500")
        image_url = MoviesProvider(config=config).parse(movies_payload["results"][0])["image_url"]
        assert image_url == "https://cdn.example/w500/abc123.jpg"


# ─── Yelp ───────────────────────────────────────────────────


class TestYelpProvider:

    @pytest.mark.asyncio
    async def test_fetch_sends_bearer_token(self, httpx_mock, config, location, yelp_payload):
        httpx_mock.add_response(json=yelp_payload)

        await YelpProvider(config=config).fetch(location)

        request = httpx_mock.get_requests()[0]
        assert request.headers["Authorization"] == "Bearer yelp-key"
        assert request.url.params["latitude"] == "47.66"
        assert request.url.params["longitude"] == "-122.35"

    def test_parse(self, yelp_payload):
        assert YelpProvider().parse(yelp_payload["businesses"][0]) == {
            "name": "Paseo",
            "rating": 4.5,
            "price": "$$",
            "url": "https://www.yelp.com/biz/paseo-seattle",
            "image_url": "https://s3-media.yelp.com/paseo.jpg",
        }

    def test_parse_missing_price(self):
        assert YelpProvider().parse({"name": "Cash only"})["price"] is None


def test_date_format():
    assert format_date(datetime(2026, 10, 19)) == "Mon Oct 19 2026"


# ─── Live (opt-in) ──────────────────────────────────────────


@pytest.mark.live
@pytest.mark.skipif(not settings.providers.geocode_api_key, reason="PROVIDER_GEOCODE_API_KEY not set")
class TestLiveGeocoding:
    """Hits the real geocoding API. Run with ``pytest -m live``."""

    @pytest.mark.asyncio
    async def test_geocode_zip(self):
        results = await GeocodingProvider().geocode("98103")
        assert results
        assert "Seattle" in GeocodingProvider().parse(results[0])["formatted_query"]
