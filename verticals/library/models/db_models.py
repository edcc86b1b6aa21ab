"""SQLAlchemy models for the library vertical.

The to_dict() method provides the standard serialisation interface used by
repositories and routers.
"""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from core.models.base import Base, IntegerIdMixin


class Book(IntegerIdMixin, Base):
    """A book record."""

    __tablename__ = "books"
    __table_args__ = {"sqlite_autoincrement": True}

    title: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(Text, nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "year": self.year,
        }

    def __repr__(self) -> str:
        return f"Book(id={self.id!r}, title={self.title!r})"
