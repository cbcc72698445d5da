"""Data layer: database engine, ORM models, repository, and cache-aside engine."""

from city_explorer.data.database import Base, create_db_engine, create_session_factory, init_db
from city_explorer.data.models import Location, Weather, Event, Movie, BusinessReview, CachedRecord
from city_explorer.data.repository import LocationRepository
from city_explorer.data.cache import CacheAsideEngine, CacheTable, Hit, Miss, Stale, KeyedLocks

__all__ = [
    "Base", "create_db_engine", "create_session_factory", "init_db",
    "Location", "Weather", "Event", "Movie", "BusinessReview", "CachedRecord",
    "LocationRepository",
    "CacheAsideEngine", "CacheTable", "Hit", "Miss", "Stale", "KeyedLocks",
]
