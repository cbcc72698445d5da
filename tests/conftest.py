"""
Shared fixtures.

The store is SQLite through aiosqlite: in-memory for single-session tests,
a temp file when several sessions run concurrently.
"""

import pytest
import pytest_asyncio

from city_explorer.data.database import create_db_engine, create_session_factory, init_db
from city_explorer.data.models import Location
from city_explorer.data.repository import LocationRepository
from city_explorer.providers import GeocodingProvider


class FakeClock:
    """Controllable epoch-seconds clock."""

    def __init__(self, now: float = 1_800_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeGeocoder(GeocodingProvider):
    """Geocoder that answers from a canned result list and counts calls."""

    def __init__(self, results: list[dict] | None = None):
        super().__init__()
        self.results = results if results is not None else []
        self.calls: list[str] = []

    async def geocode(self, search_query: str) -> list[dict]:
        self.calls.append(search_query)
        return self.results


class FakeProvider:
    """Provider call that returns canned items and counts invocations."""

    def __init__(self, items: list[dict] | None = None, error: Exception | None = None):
        self.items = items or []
        self.error = error
        self.calls = 0

    async def __call__(self, location) -> list[dict]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return [dict(item) for item in self.items]


# ─── Store ──────────────────────────────────────────────────


@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite engine with all tables created."""
    eng = create_db_engine("sqlite+aiosqlite:///:memory:")
    await init_db(eng)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def file_engine(tmp_path):
    """File-backed SQLite engine, safe for concurrent sessions."""
    eng = create_db_engine(f"sqlite+aiosqlite:///{tmp_path / 'city_explorer.db'}")
    await init_db(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as sess:
        yield sess


@pytest.fixture
def repo(session):
    return LocationRepository(session)


@pytest_asyncio.fixture
async def seattle(repo):
    """A persisted Location for the '98103' search."""
    location = Location(
        search_query="98103",
        formatted_query="Seattle, WA",
        latitude=47.66,
        longitude=-122.35,
    )
    await repo.insert(location)
    return location


@pytest.fixture
def clock():
    return FakeClock()


# ─── Provider payloads ──────────────────────────────────────


@pytest.fixture
def geocode_payload():
    return {
        "results": [
            {
                "formatted_address": "Seattle, WA",
                "geometry": {"location": {"lat": 47.66, "lng": -122.35}},
            },
            {
                "formatted_address": "Somewhere else",
                "geometry": {"location": {"lat": 1.0, "lng": 2.0}},
            },
        ],
    }


@pytest.fixture
def weather_payload():
    return {
        "daily": {
            "data": [
                {"summary": "Light rain in the morning.", "time": 1792368000},
                {"summary": "Partly cloudy throughout the day.", "time": 1792454400},
                {"summary": "Clear throughout the day.", "time": 1792540800},
            ],
        },
    }


@pytest.fixture
def events_payload():
    return {
        "events": [
            {
                "url": "https://www.eventbrite.com/e/1",
                "name": {"text": "Fremont Night Market"},
                "start": {"local": "2026-10-24T18:00:00"},
                "summary": "Food trucks and music.",
            },
        ],
    }


@pytest.fixture
def movies_payload():
    return {
        "results": [
            {
                "title": "The Long Walk",
                "overview": "A road movie.",
                "poster_path": "/abc123.jpg",
                "release_date": "2026-09-12",
                "vote_count": 1200,
                "vote_average": 7.4,
                "popularity": 310.5,
            },
            {
                "title": "No Poster",
                "overview": "",
                "poster_path": None,
                "release_date": "2026-10-01",
                "vote_count": 3,
                "vote_average": 5.0,
                "popularity": 1.2,
            },
        ],
    }


@pytest.fixture
def yelp_payload():
    return {
        "businesses": [
            {
                "name": "Paseo",
                "rating": 4.5,
                "price": "$$",
                "url": "https://www.yelp.com/biz/paseo-seattle",
                "image_url": "https://s3-media.yelp.com/paseo.jpg",
            },
        ],
    }
