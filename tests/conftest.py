"""Shared fixtures: an isolated sqlite store per test and an ASGI client."""
import httpx
import pytest
import pytest_asyncio

from api.main import create_app
from core.config import Settings
from core.database import Database
from verticals.library.bootstrap import bootstrap


@pytest.fixture
def db_path(tmp_path):
    # Parent directory deliberately missing; bootstrap must create it.
    return tmp_path / "data" / "books.db"


@pytest.fixture
def settings(db_path):
    return Settings(database_path=db_path)


@pytest_asyncio.fixture
async def database(settings):
    db = Database.from_settings(settings)
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def seeded_database(database):
    await bootstrap(database)
    return database


@pytest.fixture
def app(settings, seeded_database):
    return create_app(settings, database=seeded_database)


@pytest_asyncio.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
