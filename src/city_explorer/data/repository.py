"""
Repository layer: the store adapter every cache component goes through.

Four generic operations over the record types in ``models``. Every
statement is a SQLAlchemy expression with bound parameters; table
identity comes from the model class, never from interpolated text.
"""

from typing import Sequence, TypeVar

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from city_explorer.data.database import Base
from city_explorer.data.models import Location
from city_explorer.logging_config import get_logger
from city_explorer.exceptions import StoreError

logger = get_logger(__name__)

RecordT = TypeVar("RecordT", bound=Base)


class LocationRepository:
    """
    All database operations for locations and their cached categories.

    Usage:
        session_factory = create_session_factory(engine)
        async with session_factory() as session:
            repo = LocationRepository(session)
            rows = await repo.select_by_location_id(Weather, 1)

    Writes are committed immediately; there is no transaction spanning
    more than one operation.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def select_by_location_id(self, model: type[RecordT], location_id: int) -> list[RecordT]:
        """
        All rows of ``model`` owned by a location, oldest id first.

        Rows already loaded in this session are refreshed from the store, so
        a batch replaced by another session is never read back stale.
        """
        stmt = (
            select(model)
            .where(model.location_id == location_id)
            .order_by(model.id)
            .execution_options(populate_existing=True)
        )
        try:
            return list(await self.session.scalars(stmt))
        except SQLAlchemyError as e:
            raise self._wrap("select", model, e, location_id=location_id) from e

    async def select_by_search_query(self, search_query: str) -> list[Location]:
        """Locations persisted under exactly this search text."""
        stmt = select(Location).where(Location.search_query == search_query).order_by(Location.id)
        try:
            return list(await self.session.scalars(stmt))
        except SQLAlchemyError as e:
            raise self._wrap("select", Location, e, search_query=search_query) from e

    async def insert(self, record: RecordT) -> RecordT:
        """Persist one record and return it with its store-assigned id."""
        await self.insert_many([record])
        return record

    async def insert_many(self, records: Sequence[RecordT]) -> list[RecordT]:
        """Persist a batch of records in a single commit."""
        if not records:
            return []
        try:
            self.session.add_all(records)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise self._wrap("insert", type(records[0]), e, count=len(records)) from e
        logger.debug("Inserted %d %s row(s)", len(records), type(records[0]).__tablename__)
        return list(records)

    async def delete_by_location_id(self, model: type[RecordT], location_id: int) -> int:
        """Remove every row of ``model`` owned by a location. Returns the count."""
        stmt = delete(model).where(model.location_id == location_id)
        try:
            result = await self.session.execute(stmt)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise self._wrap("delete", model, e, location_id=location_id) from e
        logger.debug("Deleted %d %s row(s) for location %s", result.rowcount, model.__tablename__, location_id)
        return result.rowcount

    @staticmethod
    def _wrap(operation: str, model: type[Base], error: SQLAlchemyError, **details) -> StoreError:
        logger.error("Store %s on %s failed: %s", operation, model.__tablename__, str(error)[:200])
        return StoreError(
            message=f"Store {operation} on '{model.__tablename__}' failed",
            details={"table": model.__tablename__, "operation": operation, **details},
        )
