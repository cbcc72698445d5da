"""
SQLAlchemy ORM models for City Explorer.

One table per record type. ``Location`` is the identity anchor; every
cached category row points back to it through ``location_id`` and carries
the ``created_at`` timestamp its staleness is measured from.
"""

from typing import Any, ClassVar, Optional

from sqlalchemy import Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from city_explorer.data.database import Base


class Location(Base):
    """Canonical resolved place. One row per distinct search query."""
    __tablename__ = "locations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    search_query: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    formatted_query: Mapped[Optional[str]] = mapped_column(String(255))
    latitude: Mapped[Optional[float]] = mapped_column(Float)
    longitude: Mapped[Optional[float]] = mapped_column(Float)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "search_query": self.search_query,
            "formatted_query": self.formatted_query,
            "latitude": self.latitude,
            "longitude": self.longitude,
        }

    def __repr__(self) -> str:
        return f"<Location(id={self.id}, search_query='{self.search_query}')>"


class CachedRecord:
    """
    Columns shared by every cached category table.

    Subclasses set ``STALENESS_SECONDS``, the default maximum age of their
    rows before the cache treats them as stale.
    """

    STALENESS_SECONDS: ClassVar[float] = 0.0
    PAYLOAD_FIELDS: ClassVar[tuple[str, ...]] = ()

    # Ids of a deleted batch are never handed to its replacement
    __table_args__ = {"sqlite_autoincrement": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    created_at: Mapped[float] = mapped_column(Float, nullable=False)

    @declared_attr
    def location_id(cls) -> Mapped[int]:
        return mapped_column(
            Integer,
            ForeignKey("locations.id", ondelete="CASCADE"),
            nullable=False,
            index=True,
        )

    def to_dict(self) -> dict[str, Any]:
        data = {field: getattr(self, field) for field in self.PAYLOAD_FIELDS}
        data["created_at"] = self.created_at
        data["location_id"] = self.location_id
        return data

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={self.id}, location_id={self.location_id})>"


# --- Cached categories ---


class Weather(CachedRecord, Base):
    """Daily forecast summary."""
    __tablename__ = "weathers"

    STALENESS_SECONDS = 15
    PAYLOAD_FIELDS = ("forecast", "time")

    forecast: Mapped[Optional[str]] = mapped_column(Text)
    time: Mapped[Optional[str]] = mapped_column(String(32))


class Event(CachedRecord, Base):
    """Upcoming event near the location."""
    __tablename__ = "events"

    STALENESS_SECONDS = 86400
    PAYLOAD_FIELDS = ("link", "name", "event_date", "summary")

    link: Mapped[Optional[str]] = mapped_column(Text)
    name: Mapped[Optional[str]] = mapped_column(String(500))
    event_date: Mapped[Optional[str]] = mapped_column(String(32))
    summary: Mapped[Optional[str]] = mapped_column(Text)


class Movie(CachedRecord, Base):
    """Now-playing movie."""
    __tablename__ = "movies"

    STALENESS_SECONDS = 25920
    PAYLOAD_FIELDS = (
        "title", "overview", "image_url", "released_on",
        "total_votes", "average_votes", "popularity",
    )

    title: Mapped[Optional[str]] = mapped_column(String(500))
    overview: Mapped[Optional[str]] = mapped_column(Text)
    image_url: Mapped[Optional[str]] = mapped_column(Text)
    released_on: Mapped[Optional[str]] = mapped_column(String(32))
    total_votes: Mapped[Optional[int]] = mapped_column(Integer)
    average_votes: Mapped[Optional[float]] = mapped_column(Float)
    popularity: Mapped[Optional[float]] = mapped_column(Float)


class BusinessReview(CachedRecord, Base):
    """Nearby business with its review summary."""
    __tablename__ = "yelps"

    STALENESS_SECONDS = 2629743
    PAYLOAD_FIELDS = ("name", "rating", "price", "url", "image_url")

    name: Mapped[Optional[str]] = mapped_column(String(255))
    rating: Mapped[Optional[float]] = mapped_column(Float)
    price: Mapped[Optional[str]] = mapped_column(String(16))
    url: Mapped[Optional[str]] = mapped_column(Text)
    image_url: Mapped[Optional[str]] = mapped_column(Text)
