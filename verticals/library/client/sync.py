"""Book sync controller: keeps a client-side list in step with the API.

Every successful mutation is followed by a full refetch of the list; the
edited buffer is never patched into the list locally, so the client never
has to repeat server-side validation or id assignment. Each user action is
exactly one request (plus the refetch after a successful write): no
retries, no queuing, no cancellation. If actions overlap, the last
response to arrive wins.

Usage::

    async with httpx.AsyncClient(base_url="http://localhost:8000") as http:
        sync = BookSyncController(http)
        await sync.fetch_books()
        sync.select(sync.state.books[1])
        sync.edit_form(year="2000")
        await sync.submit()
"""

from __future__ import annotations

import httpx
import structlog
from pydantic import ValidationError as SchemaError

from verticals.library.client.state import (
    Action,
    Browsing,
    Editing,
    FormBuffer,
    InvalidTransition,
    ViewState,
)
from verticals.library.config import API_PREFIX, BOOKS_PATH
from verticals.library.models.schemas import BookRecord

log = structlog.get_logger()

FETCH_ERROR = "Error fetching books"
UPDATE_ERROR = "Error updating book"
DELETE_ERROR = "Error deleting book"

_FORM_FIELDS = ("title", "author", "year")


class BookSyncController:
    """Client view controller over a books API."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        books_path: str = API_PREFIX + BOOKS_PATH,
    ):
        self.client = client
        self.books_path = books_path.rstrip("/")
        self.state = ViewState()

    def _book_url(self, book_id: int) -> str:
        return f"{self.books_path}/{book_id}"

    # -- Reads --

    async def fetch_books(self) -> bool:
        """Replace the list with the server's. Returns True on success."""
        self.state.error = ""
        try:
            response = await self.client.get(self.books_path)
            response.raise_for_status()
            books = [BookRecord.model_validate(item) for item in response.json()]
        except (httpx.HTTPError, ValueError, SchemaError) as exc:
            log.warning("book_list_fetch_failed", error=str(exc))
            self.state.error = FETCH_ERROR
            return False
        self.state.books = books
        return True

    async def fetch_book(self, book_id: int) -> BookRecord | None:
        """Read one book without touching the view state."""
        try:
            response = await self.client.get(self._book_url(book_id))
            response.raise_for_status()
            return BookRecord.model_validate(response.json())
        except (httpx.HTTPError, ValueError, SchemaError) as exc:
            log.info("book_fetch_failed", book_id=book_id, error=str(exc))
            return None

    # -- Local edits --

    def select(self, book: BookRecord) -> None:
        """Open the form on ``book``, seeded from its current values."""
        self.state.transition(Action.SELECT, Editing(book, FormBuffer.from_book(book)))
        self.state.error = ""

    def edit_form(self, **fields: str) -> None:
        """Change form fields while editing. Nothing is validated here."""
        form = self.state.form
        if form is None:
            raise InvalidTransition("Cannot edit the form while browsing")
        unknown = set(fields) - set(_FORM_FIELDS)
        if unknown:
            raise TypeError(f"Unknown form fields: {sorted(unknown)}")
        for name, value in fields.items():
            setattr(form, name, value)

    def cancel(self) -> None:
        """Discard the form and selection. No request is made."""
        self.state.transition(Action.CANCEL, Browsing())

    # -- Mutations --

    async def submit(self) -> BookRecord | None:
        """Send the form as an update of the selected book.

        On success the view returns to browsing and the list is refetched;
        the updated record from the server is returned. On failure the form
        stays open, unchanged, with the error set, and None is returned.
        """
        self.state.require(Action.COMMIT)
        editing: Editing = self.state.current

        try:
            response = await self.client.put(
                self._book_url(editing.book.id),
                json=editing.form.to_payload(),
            )
            response.raise_for_status()
            updated = BookRecord.model_validate(response.json())
        except (httpx.HTTPError, ValueError, SchemaError) as exc:
            log.warning("book_update_failed", book_id=editing.book.id, error=str(exc))
            self.state.error = UPDATE_ERROR
            return None

        self.state.transition(Action.COMMIT, Browsing())
        self.state.error = ""
        await self.fetch_books()
        return updated

    async def delete(self, book_id: int) -> bool:
        """Delete a book, then refetch. Returns True on success.

        On failure the error is set and the list is left as last fetched.
        """
        self.state.require(Action.DELETE)
        try:
            response = await self.client.delete(self._book_url(book_id))
            response.raise_for_status()
        except httpx.HTTPError as exc:
            log.warning("book_delete_failed", book_id=book_id, error=str(exc))
            self.state.error = DELETE_ERROR
            return False

        self.state.error = ""
        await self.fetch_books()
        return True
