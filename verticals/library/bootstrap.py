"""Schema bootstrap: storage, tables and seed rows.

Runs once at application start (and directly from tests). Re-running is
harmless: tables are created only when missing and the seed set is only
inserted into an empty table.
"""

from collections.abc import Iterable

import structlog
from sqlalchemy.exc import SQLAlchemyError

from core.database import Database
from core.errors import BootstrapError
from verticals.library.config import SEED_BOOKS
from verticals.library.repository import BookRepository

log = structlog.get_logger()


async def bootstrap(
    database: Database,
    seed: Iterable[dict] = SEED_BOOKS,
) -> int:
    """Create storage and schema, then seed an empty table.

    Returns the number of seed rows inserted (0 when the table already had
    data). Raises BootstrapError on any storage failure; there is no
    partially bootstrapped state to recover from.
    """
    try:
        await database.initialize()
    except (OSError, SQLAlchemyError) as exc:
        log.error("bootstrap_schema_failed", url=database.url, error=str(exc))
        raise BootstrapError(f"Failed to initialize book store: {exc}") from exc

    try:
        async with database.session() as session:
            repo = BookRepository(session)
            existing = await repo.count()
            if existing:
                log.info("bootstrap_skipped_seed", existing=existing)
                return 0

            inserted = len(await repo.insert_many(seed))
    except SQLAlchemyError as exc:
        log.error("bootstrap_seed_failed", url=database.url, error=str(exc))
        raise BootstrapError(f"Failed to seed book store: {exc}") from exc

    log.info("books_seeded", count=inserted)
    return inserted
