"""Library repository: async database access for book records.

Extends BaseRepository with the book-shaped signatures the request handler
and the bootstrapper call.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from core.database import get_session
from patterns.repository import BaseRepository
from verticals.library.models.db_models import Book


# ---------------------------------------------------------------------------
# Book repository
# ---------------------------------------------------------------------------

class BookRepository(BaseRepository[Book]):
    """Repository for book CRUD operations."""

    model = Book

    async def insert_book(self, title: str, author: str, year: int) -> Book:
        """Insert a book; the store assigns its id."""
        return await self.insert({"title": title, "author": author, "year": year})

    async def update_book(self, book_id: int, title: str, author: str, year: int) -> int:
        """Replace all fields of a book. Returns the affected-row count."""
        return await self.update(
            book_id, {"title": title, "author": author, "year": year}
        )


# ---------------------------------------------------------------------------
# FastAPI dependency factories
# ---------------------------------------------------------------------------

def get_book_repository(
    session: AsyncSession = Depends(get_session),
) -> BookRepository:
    """FastAPI dependency for BookRepository."""
    return BookRepository(session)
