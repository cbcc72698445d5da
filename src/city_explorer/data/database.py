"""
Database engine and session management.

Supports PostgreSQL (production, asyncpg) and SQLite (development and
tests, aiosqlite) via DATABASE_URL. Uses SQLAlchemy's asyncio extension so
store calls never block the event loop.
"""

from pathlib import Path

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from city_explorer.config import settings
from city_explorer.logging_config import get_logger
from city_explorer.exceptions import StoreConnectionError

logger = get_logger(__name__)


class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


def _is_sqlite(url: str) -> bool:
    """Check if the database URL is SQLite."""
    return url.startswith("sqlite")


def _safe_url(url: str) -> str:
    """Strip credentials from a URL before it goes into logs or errors."""
    return url.split("@")[-1] if "@" in url else url


def _ensure_sqlite_dir(url: str) -> None:
    """Create the parent directory of a file-backed SQLite database."""
    database = make_url(url).database
    if database and database != ":memory:" and not database.startswith("file:"):
        Path(database).parent.mkdir(parents=True, exist_ok=True)


def create_db_engine(database_url: str | None = None) -> AsyncEngine:
    """
    Create an async SQLAlchemy engine based on the database URL.

    Args:
        database_url: Override the URL from settings. Useful for testing.

    Returns:
        AsyncEngine instance
    """
    url = database_url or settings.database.url
    logger.info("Creating database engine: %s", "SQLite" if _is_sqlite(url) else "PostgreSQL")

    try:
        if _is_sqlite(url):
            _ensure_sqlite_dir(url)
            options = {"connect_args": {"check_same_thread": False}, "echo": settings.database.echo}
            if ":memory:" in url:
                # One shared connection so the in-memory database survives;
                # concurrent sessions need a file-backed database
                options["poolclass"] = StaticPool
            engine = create_async_engine(url, **options)

            @event.listens_for(engine.sync_engine, "connect")
            def _set_sqlite_pragma(dbapi_conn, connection_record):
                cursor = dbapi_conn.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()
        else:
            engine = create_async_engine(
                url,
                pool_size=10,
                max_overflow=20,
                pool_pre_ping=True,  # Health check before using connection
                echo=settings.database.echo,
            )
        return engine

    except (SQLAlchemyError, ImportError, ValueError, OSError) as e:
        raise StoreConnectionError(
            message=f"Failed to create database engine: {e}",
            details={"url": _safe_url(url)},
        ) from e


async def check_connection(engine: AsyncEngine) -> bool:
    """Run ``SELECT 1`` against the engine. Returns False instead of raising."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except (SQLAlchemyError, OSError) as e:
        logger.warning("Database connection check failed: %s", str(e)[:200])
        return False


def create_session_factory(engine: AsyncEngine | None = None) -> async_sessionmaker[AsyncSession]:
    """
    Create a session factory bound to the given engine.

    Args:
        engine: Async engine. If None, creates one from settings.

    Returns:
        Configured async_sessionmaker
    """
    if engine is None:
        engine = create_db_engine()
    return async_sessionmaker(engine, class_=AsyncSession, autoflush=False, expire_on_commit=False)


async def init_db(engine: AsyncEngine | None = None) -> None:
    """
    Initialize the database: create all tables.

    Args:
        engine: Async engine. If None, creates one from settings.
    """
    if engine is None:
        engine = create_db_engine()

    # Import all models so they register with Base.metadata
    import city_explorer.data.models  # noqa: F401

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except (SQLAlchemyError, OSError) as e:
        raise StoreConnectionError(
            message=f"Failed to initialize database: {e}",
            details={"url": _safe_url(str(engine.url))},
        ) from e
    logger.info("Database tables created successfully")
