"""Book request handler: dispatch, validation and store access.

Transport-independent core of the books endpoint. ``dispatch`` takes the
method, the raw identifier token from the request target and the decoded
body, and either returns a HandlerResult or raises a BookApiError. Store
exceptions never escape as-is: they are logged here and re-raised as a
PersistenceError with a generic message.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import structlog
from fastapi import Depends
from opentelemetry import trace
from sqlalchemy.exc import SQLAlchemyError

from core.errors import (
    MethodNotAllowedError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from verticals.library.config import ALLOWED_METHODS
from verticals.library.repository import BookRepository, get_book_repository
from verticals.library.rules import (
    check_identifier,
    check_identifier_present,
    validate_update_body,
)

log = structlog.get_logger()
tracer = trace.get_tracer(__name__)

# Errors the store can raise. Parameter binding errors from the sqlite
# driver (OverflowError) reach us without a SQLAlchemy wrapper.
STORE_ERRORS = (SQLAlchemyError, OverflowError)


@dataclass
class HandlerResult:
    """Successful outcome; a payload of None means no content."""

    status_code: int
    payload: Any = None


class BookRequestHandler:
    """Maps (method, identifier, body) onto BookRepository calls."""

    def __init__(
        self,
        repo: BookRepository,
        allowed_methods: Sequence[str] = ALLOWED_METHODS,
    ):
        self.repo = repo
        self.allowed_methods = tuple(allowed_methods)

    async def dispatch(
        self,
        method: str,
        id_token: str | None = None,
        body: Any = None,
    ) -> HandlerResult:
        method = method.upper()

        identifier = check_identifier(id_token)
        if not identifier.passed:
            log.info("book_request_rejected", method=method, token=id_token,
                     reason=identifier.message)
            raise ValidationError(identifier.message)
        book_id = identifier.details["book_id"]

        with tracer.start_as_current_span(
            f"books.{method.lower()}",
            attributes={"books.method": method, "books.has_id": book_id is not None},
        ):
            if method == "GET":
                if book_id is None:
                    return await self.list_books()
                return await self.get_book(book_id)
            if method == "PUT":
                return await self.update_book(book_id, body)
            if method == "DELETE":
                return await self.delete_book(book_id)

        raise MethodNotAllowedError(method, self.allowed_methods)

    # -- Operations --

    async def list_books(self) -> HandlerResult:
        try:
            books = await self.repo.list_all()
        except STORE_ERRORS:
            log.exception("book_list_failed")
            raise PersistenceError("Failed to fetch books")
        return HandlerResult(200, [book.to_dict() for book in books])

    async def get_book(self, book_id: int) -> HandlerResult:
        try:
            book = await self.repo.get_by_id(book_id)
        except STORE_ERRORS:
            log.exception("book_fetch_failed", book_id=book_id)
            raise PersistenceError("Failed to fetch books")
        if book is None:
            raise NotFoundError("Book not found")
        return HandlerResult(200, book.to_dict())

    async def update_book(self, book_id: int | None, body: Any) -> HandlerResult:
        present = check_identifier_present(book_id)
        if not present.passed:
            raise ValidationError(present.message)

        checks = validate_update_body(body)
        if not checks.all_passed:
            failure = checks.first_failure
            log.info("book_update_rejected", book_id=book_id, rule=failure.rule_name,
                     details=failure.details)
            raise ValidationError(failure.message)
        year = checks.results[-1].details["year"]

        try:
            affected = await self.repo.update_book(
                book_id, body["title"], body["author"], year
            )
            if affected == 0:
                raise NotFoundError("Book not found")
            book = await self.repo.get_by_id(book_id)
        except STORE_ERRORS:
            log.exception("book_update_failed", book_id=book_id)
            raise PersistenceError("Failed to update book")

        if book is None:
            raise NotFoundError("Book not found")
        log.info("book_updated", book_id=book_id)
        return HandlerResult(200, book.to_dict())

    async def delete_book(self, book_id: int | None) -> HandlerResult:
        present = check_identifier_present(book_id)
        if not present.passed:
            raise ValidationError(present.message)

        try:
            affected = await self.repo.delete_by_id(book_id)
        except STORE_ERRORS:
            log.exception("book_delete_failed", book_id=book_id)
            raise PersistenceError("Failed to delete book")

        if affected == 0:
            raise NotFoundError("Book not found")
        log.info("book_deleted", book_id=book_id)
        return HandlerResult(204)


# ---------------------------------------------------------------------------
# FastAPI dependency factories
# ---------------------------------------------------------------------------

def get_book_handler(
    repo: BookRepository = Depends(get_book_repository),
) -> BookRequestHandler:
    """FastAPI dependency for BookRequestHandler."""
    return BookRequestHandler(repo)
