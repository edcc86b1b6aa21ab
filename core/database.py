"""Async SQLAlchemy database engine and session management.

Provides an explicitly constructed async database layer with:
- A ``Database`` object owning the engine and session factory
- An explicit ``initialize()`` step (storage directory + schema)
- FastAPI dependency injection via get_session()
- Automatic session lifecycle (commit on success, rollback on error)

Nothing happens at import time; the application (or a test) builds a
``Database`` and hands it to whoever needs it.
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from core.config import Settings
from core.models.base import Base


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

class Database:
    """Engine + session factory for a single store instance.

    Usage::

        database = Database("sqlite+aiosqlite:///data/books.db")
        await database.initialize()
        async with database.session() as session:
            ...
        await database.dispose()
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.engine: AsyncEngine = create_async_engine(
            url,
            echo=echo,
            pool_pre_ping=True,
        )
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(settings.database_url, echo=settings.echo_sql)

    @property
    def storage_path(self) -> Path | None:
        """Filesystem location of a file-backed sqlite store, else None."""
        url = make_url(self.url)
        if not url.get_backend_name().startswith("sqlite"):
            return None
        if not url.database or url.database == ":memory:":
            return None
        return Path(url.database)

    # -- Lifecycle --

    async def initialize(self) -> None:
        """Create the storage directory (if file-backed) and all tables.

        Safe to call repeatedly: the directory and tables are only created
        when missing.
        """
        path = self.storage_path
        if path is not None:
            path.parent.mkdir(parents=True, exist_ok=True)

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Dispose of the connection pool on shutdown."""
        await self.engine.dispose()

    # -- Sessions --

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Context manager yielding a session with commit/rollback."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------

def get_database(request: Request) -> Database:
    """Return the Database attached to the running application."""
    return request.app.state.database


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session with automatic commit/rollback.

    Usage in FastAPI routes::

        @router.get("/items")
        async def list_items(session: AsyncSession = Depends(get_session)):
            result = await session.execute(select(Item))
            return result.scalars().all()
    """
    async with get_database(request).session() as session:
        yield session
