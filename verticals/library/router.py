"""Library API router: the books resource.

A single catch-all resource, ``/books`` and ``/books/{id}``, hands every
method to BookRequestHandler. ``error_response`` is the one place a
BookApiError becomes an HTTP response.
"""

import json
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from core.errors import BookApiError, MethodNotAllowedError
from verticals.library.config import BOOKS_PATH
from verticals.library.handler import BookRequestHandler, HandlerResult, get_book_handler
from verticals.library.models.schemas import BookRecord, ErrorResponse

router = APIRouter()

# Every standard method is routed so that unsupported ones reach the
# handler and get its 405, never the framework default.
ROUTED_METHODS = [
    "GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "TRACE", "CONNECT",
]

ERROR_RESPONSES = {
    status: {"model": ErrorResponse} for status in (400, 404, 500)
}


def error_response(exc: BookApiError) -> Response:
    """Translate a handler failure into its HTTP response."""
    if isinstance(exc, MethodNotAllowedError):
        return PlainTextResponse(
            exc.message,
            status_code=exc.status_code,
            headers={"Allow": ", ".join(exc.allowed)},
        )
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


def result_response(result: HandlerResult) -> Response:
    if result.payload is None:
        return Response(status_code=result.status_code)
    return JSONResponse(result.payload, status_code=result.status_code)


async def _read_body(request: Request) -> Any:
    """Decode a JSON body; anything undecodable counts as no body."""
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return None


async def _handle(
    request: Request,
    handler: BookRequestHandler,
    id_token: str | None,
) -> Response:
    body = await _read_body(request) if request.method == "PUT" else None
    try:
        result = await handler.dispatch(request.method, id_token, body)
    except BookApiError as exc:
        return error_response(exc)
    return result_response(result)


# ============================================================================
# Book Endpoints
# ============================================================================

@router.api_route(
    BOOKS_PATH,
    methods=ROUTED_METHODS,
    response_model=list[BookRecord],
    responses=ERROR_RESPONSES,
)
async def books_collection(
    request: Request,
    handler: BookRequestHandler = Depends(get_book_handler),
):
    """List books (GET); other methods need an identifier or are refused."""
    return await _handle(request, handler, None)


@router.api_route(
    BOOKS_PATH + "/{book_path:path}",
    methods=ROUTED_METHODS,
    response_model=BookRecord,
    responses=ERROR_RESPONSES,
)
async def books_item(
    book_path: str,
    request: Request,
    handler: BookRequestHandler = Depends(get_book_handler),
):
    """Get, replace or delete one book.

    Only the first path segment is the identifier; anything after it is
    ignored.
    """
    id_token = book_path.split("/", 1)[0] or None
    return await _handle(request, handler, id_token)
