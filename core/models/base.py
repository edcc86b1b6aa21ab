"""Base model for all SQLAlchemy models.

Provides:
- Base: Declarative base class for all models
- IntegerIdMixin: Adds an autoincrementing integer primary key

Identifiers are assigned by the store on insert, grow monotonically and are
never reused (sqlite AUTOINCREMENT semantics).
"""

from sqlalchemy import Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all book service models."""
    pass


class IntegerIdMixin:
    """Mixin providing a store-assigned integer primary key.

    Adds:
    - id: INTEGER PRIMARY KEY AUTOINCREMENT
    """

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
