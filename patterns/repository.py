"""Async repository pattern for database access.

Provides a generic base repository with CRUD operations built from
SQLAlchemy's typed statement API (``select``/``update``/``delete`` and ORM ``add``),
so every value reaches the driver as a bound parameter. Mutations report the
number of affected rows; callers use that count to tell "no such record"
from "record changed".

Example: BookRepository extending BaseRepository.
"""

from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.models.base import Base

# ---------------------------------------------------------------------------
# Type variable for model classes
# ---------------------------------------------------------------------------

ModelT = TypeVar("ModelT", bound=Base)


# ---------------------------------------------------------------------------
# Base repository
# ---------------------------------------------------------------------------

class BaseRepository(Generic[ModelT]):
    """Generic async repository keyed by an integer ``id`` column.

    Subclass and set `model` to your SQLAlchemy model::

        class BookRepository(BaseRepository[Book]):
            model = Book

            async def by_author(self, author: str):
                stmt = select(self.model).where(self.model.author == author)
                result = await self.session.execute(stmt)
                return list(result.scalars().all())

    Mutating methods commit before returning, so each call is atomic on
    its own and the reported count is final.
    """

    model: type[ModelT]

    def __init__(self, session: AsyncSession):
        self.session = session

    # -- List --

    async def list_all(self) -> list[ModelT]:
        """Return every row ordered by id."""
        stmt = select(self.model).order_by(self.model.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    # -- Count --

    async def count(self) -> int:
        stmt = select(func.count()).select_from(self.model)
        result = await self.session.execute(stmt)
        return result.scalar() or 0

    # -- Get by ID --

    async def get_by_id(self, item_id: int) -> ModelT | None:
        """Get a single row by primary key, or None."""
        stmt = (
            select(self.model)
            .where(self.model.id == item_id)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    # -- Create --

    async def insert(self, data: dict[str, Any]) -> ModelT:
        """Insert a row; the store assigns its id."""
        item = self.model(**data)
        self.session.add(item)
        await self.session.flush()
        await self.session.commit()
        return item

    async def insert_many(self, rows: Iterable[dict[str, Any]]) -> list[ModelT]:
        """Insert several rows in one transaction, in order."""
        items = [self.model(**data) for data in rows]
        self.session.add_all(items)
        await self.session.flush()
        await self.session.commit()
        return items

    # -- Update --

    async def update(self, item_id: int, data: dict[str, Any]) -> int:
        """Overwrite columns of one row. Returns the affected-row count."""
        stmt = (
            update(self.model)
            .where(self.model.id == item_id)
            .values(**data)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount

    # -- Delete --

    async def delete_by_id(self, item_id: int) -> int:
        """Delete one row. Returns the affected-row count."""
        stmt = (
            delete(self.model)
            .where(self.model.id == item_id)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount
