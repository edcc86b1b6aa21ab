"""Library vertical configuration.

Holds the canonical seed rows and the default settings instance, built
from the environment.
"""

from core.config import Settings

# Inserted once, only into an empty table.
SEED_BOOKS: tuple[dict, ...] = (
    {"title": "The Great Gatsby", "author": "F. Scott Fitzgerald", "year": 1925},
    {"title": "1984", "author": "George Orwell", "year": 1949},
    {"title": "To Kill a Mockingbird", "author": "Harper Lee", "year": 1960},
)

# Allowed methods on the books resource, in the order advertised by 405s.
ALLOWED_METHODS: tuple[str, ...] = ("GET", "PUT", "DELETE")

API_PREFIX = "/api"
BOOKS_PATH = "/books"

config = Settings.from_env()
