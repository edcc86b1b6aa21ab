"""Books API: FastAPI entry point.

Registers middleware, routers, and lifecycle hooks. The store is built from
Settings unless one is injected, and bootstrapped in the lifespan before the
first request is served; a bootstrap failure aborts startup.
"""

from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import RequestContextMiddleware
from core.config import Settings
from core.database import Database
from core.logging import configure_logging
from core.observability.otel_setup import setup_otel
from verticals.library.bootstrap import bootstrap
from verticals.library.config import API_PREFIX, config
from verticals.library.router import router as library_router

VERSION = "0.1.0"

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup/shutdown hooks."""
    settings: Settings = app.state.settings
    database: Database = app.state.database

    if settings.otel_endpoint:
        setup_otel(settings.service_name, settings.otel_endpoint)

    await bootstrap(database)
    log.info("books_api_started", version=VERSION, url=database.url)
    try:
        yield
    finally:
        await database.dispose()
        log.info("books_api_shutting_down")


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
) -> FastAPI:
    """Build the application around an explicit Settings and Database."""
    settings = settings or config
    configure_logging(settings.log_level, settings.log_json)

    app = FastAPI(
        title="Books API",
        description="Book record management: list, get, update and delete",
        version=VERSION,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database or Database.from_settings(settings)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request id / log context
    app.add_middleware(RequestContextMiddleware)

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------

    app.include_router(library_router, prefix=API_PREFIX, tags=["Books"])

    # -----------------------------------------------------------------------
    # Health & root
    # -----------------------------------------------------------------------

    @app.get("/health")
    async def health():
        return {"status": "healthy", "version": VERSION}

    @app.get("/")
    async def root():
        return {
            "name": "Books API",
            "version": VERSION,
            "docs": "/docs",
            "books": f"{API_PREFIX}/books",
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=config.debug,
    )
