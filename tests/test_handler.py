"""Test the request handler against a stand-in repository."""
import pytest
from sqlalchemy.exc import OperationalError
from structlog.testing import capture_logs

from core.errors import (
    MethodNotAllowedError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from verticals.library.handler import BookRequestHandler
from verticals.library.models.db_models import Book


class FakeRepository:
    """Records calls; optionally raises a store error on every call.

    ``fail`` is True for a SQLAlchemy error, or the exception to raise.
    """

    def __init__(self, books=None, fail=False):
        self.books = {b.id: b for b in (books or [])}
        self.fail = fail
        self.calls = []

    def _enter(self, name, *args):
        self.calls.append((name, *args))
        if isinstance(self.fail, Exception):
            raise self.fail
        if self.fail:
            raise OperationalError("SELECT secret", {}, Exception("disk I/O error"))

    async def list_all(self):
        self._enter("list_all")
        return list(self.books.values())

    async def get_by_id(self, book_id):
        self._enter("get_by_id", book_id)
        return self.books.get(book_id)

    async def update_book(self, book_id, title, author, year):
        self._enter("update_book", book_id, title, author, year)
        book = self.books.get(book_id)
        if book is None:
            return 0
        book.title, book.author, book.year = title, author, year
        return 1

    async def delete_by_id(self, book_id):
        self._enter("delete_by_id", book_id)
        return 1 if self.books.pop(book_id, None) else 0


def _repo(**kwargs):
    return FakeRepository(
        books=[
            Book(id=1, title="The Great Gatsby", author="F. Scott Fitzgerald", year=1925),
            Book(id=2, title="1984", author="George Orwell", year=1949),
        ],
        **kwargs,
    )


@pytest.mark.asyncio
async def test_list():
    result = await BookRequestHandler(_repo()).dispatch("GET")
    assert result.status_code == 200
    assert [b["id"] for b in result.payload] == [1, 2]


@pytest.mark.asyncio
async def test_get_one():
    result = await BookRequestHandler(_repo()).dispatch("get", "2")
    assert result.payload == {"id": 2, "title": "1984", "author": "George Orwell", "year": 1949}


@pytest.mark.asyncio
async def test_get_missing():
    with pytest.raises(NotFoundError, match="Book not found"):
        await BookRequestHandler(_repo()).dispatch("GET", "3")


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "POST"])
async def test_malformed_id_rejected_before_store_access(method):
    repo = _repo()
    with pytest.raises(ValidationError, match="Invalid ID format"):
        await BookRequestHandler(repo).dispatch(method, "abc", {"title": "x"})
    assert repo.calls == []


@pytest.mark.asyncio
async def test_update():
    repo = _repo()
    body = {"title": "1984", "author": "George Orwell", "year": "2000"}
    result = await BookRequestHandler(repo).dispatch("PUT", "2", body)
    assert result.status_code == 200
    assert result.payload["year"] == 2000
    assert ("update_book", 2, "1984", "George Orwell", 2000) in repo.calls


@pytest.mark.asyncio
async def test_update_requires_id():
    repo = _repo()
    with pytest.raises(ValidationError, match="Missing book ID"):
        await BookRequestHandler(repo).dispatch("PUT", None, {"title": "a", "author": "b", "year": 1})
    assert repo.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    None,
    {},
    {"author": "George Orwell", "year": 1949},
    {"title": "1984", "year": 1949},
    {"title": "1984", "author": "George Orwell"},
    {"title": "1984", "author": "George Orwell", "year": 0},
    {"title": "", "author": "George Orwell", "year": 1949},
])
async def test_update_missing_fields_does_not_touch_store(body):
    repo = _repo()
    with pytest.raises(ValidationError, match="Missing required fields"):
        await BookRequestHandler(repo).dispatch("PUT", "2", body)
    assert repo.calls == []


@pytest.mark.asyncio
async def test_update_bad_year():
    repo = _repo()
    with pytest.raises(ValidationError, match="Invalid year"):
        await BookRequestHandler(repo).dispatch(
            "PUT", "2", {"title": "1984", "author": "George Orwell", "year": "later"}
        )
    assert repo.calls == []


@pytest.mark.asyncio
async def test_update_missing_record():
    with pytest.raises(NotFoundError):
        await BookRequestHandler(_repo()).dispatch(
            "PUT", "9", {"title": "a", "author": "b", "year": 1}
        )


@pytest.mark.asyncio
async def test_delete():
    repo = _repo()
    result = await BookRequestHandler(repo).dispatch("DELETE", "1")
    assert result.status_code == 204
    assert result.payload is None
    assert list(repo.books) == [2]


@pytest.mark.asyncio
async def test_delete_requires_id():
    with pytest.raises(ValidationError, match="Missing book ID"):
        await BookRequestHandler(_repo()).dispatch("DELETE")


@pytest.mark.asyncio
async def test_delete_missing_record():
    with pytest.raises(NotFoundError):
        await BookRequestHandler(_repo()).dispatch("DELETE", "9")


@pytest.mark.asyncio
async def test_other_method_not_allowed():
    with pytest.raises(MethodNotAllowedError) as info:
        await BookRequestHandler(_repo()).dispatch("POST")
    assert info.value.allowed == ("GET", "PUT", "DELETE")
    assert info.value.message == "Method POST Not Allowed"


@pytest.mark.asyncio
@pytest.mark.parametrize("method,token,body,message", [
    ("GET", None, None, "Failed to fetch books"),
    ("GET", "1", None, "Failed to fetch books"),
    ("PUT", "1", {"title": "a", "author": "b", "year": 1}, "Failed to update book"),
    ("DELETE", "1", None, "Failed to delete book"),
])
async def test_store_errors_become_persistence_errors(method, token, body, message):
    handler = BookRequestHandler(_repo(fail=True))
    with capture_logs() as logs:
        with pytest.raises(PersistenceError) as info:
            await handler.dispatch(method, token, body)
    assert info.value.message == message
    assert "disk I/O" not in info.value.message
    assert any(entry["event"].endswith("_failed") for entry in logs)


@pytest.mark.asyncio
@pytest.mark.parametrize("method,body,message", [
    ("GET", None, "Failed to fetch books"),
    ("PUT", {"title": "a", "author": "b", "year": 1}, "Failed to update book"),
    ("DELETE", None, "Failed to delete book"),
])
async def test_driver_errors_become_persistence_errors(method, body, message):
    error = OverflowError("Python int too large to convert to SQLite INTEGER")
    handler = BookRequestHandler(_repo(fail=error))
    with pytest.raises(PersistenceError) as info:
        await handler.dispatch(method, "1", body)
    assert info.value.message == message
