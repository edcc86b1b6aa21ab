"""Client view state: an explicit Browsing/Editing variant.

The edit mode is a tagged variant rather than a flag plus a nullable
selection, so "editing with nothing selected" cannot be represented. Every
mode change names the user action behind it and is checked against the
transition table.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Union

from verticals.library.models.schemas import BookRecord
from verticals.library.rules import parse_integer

_LEADING_INTEGER_RE = re.compile(r"\s*([+-]?\d+)")


# ---------------------------------------------------------------------------
# State definitions
# ---------------------------------------------------------------------------

class Mode(str, Enum):
    """Client view modes."""

    BROWSING = "browsing"
    EDITING = "editing"


class Action(str, Enum):
    """User actions the view reacts to."""

    SELECT = "select"
    CANCEL = "cancel"
    COMMIT = "commit"
    DELETE = "delete"


# Allowed transitions: {current_mode: {action: next_mode}}
_MODE_TRANSITIONS: dict[Mode, dict[Action, Mode]] = {
    Mode.BROWSING: {
        Action.SELECT: Mode.EDITING,
        Action.DELETE: Mode.BROWSING,
    },
    Mode.EDITING: {
        Action.SELECT: Mode.EDITING,  # reselect replaces the buffer
        Action.CANCEL: Mode.BROWSING,
        Action.COMMIT: Mode.BROWSING,
        Action.DELETE: Mode.EDITING,
    },
}


class InvalidTransition(ValueError):
    """Raised for an action the current mode does not accept."""


# ---------------------------------------------------------------------------
# Form buffer
# ---------------------------------------------------------------------------

@dataclass
class FormBuffer:
    """String-typed mirror of a book's editable fields."""

    title: str = ""
    author: str = ""
    year: str = ""

    @classmethod
    def from_book(cls, book: BookRecord) -> "FormBuffer":
        return cls(title=book.title, author=book.author, year=str(book.year))

    def to_payload(self) -> dict:
        """Request body for an update.

        The year is read from its leading digits, so "2000abc" and "2000.5"
        send 2000; a year with no leading digits is sent as null.
        """
        match = _LEADING_INTEGER_RE.match(self.year)
        return {
            "title": self.title,
            "author": self.author,
            "year": parse_integer(match.group(1)) if match else None,
        }


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Browsing:
    """List displayed, no form open."""

    mode: ClassVar[Mode] = Mode.BROWSING


@dataclass(frozen=True)
class Editing:
    """A form open on ``book``. The buffer itself is mutable."""

    book: BookRecord
    form: FormBuffer

    mode: ClassVar[Mode] = Mode.EDITING


ViewMode = Union[Browsing, Editing]


# ---------------------------------------------------------------------------
# View state
# ---------------------------------------------------------------------------

@dataclass
class ViewState:
    """Everything the client view renders.

    Usage::

        state = ViewState()
        state.transition(Action.SELECT, Editing(book, FormBuffer.from_book(book)))
        state.transition(Action.CANCEL, Browsing())
    """

    books: list[BookRecord] = field(default_factory=list)
    current: ViewMode = field(default_factory=Browsing)
    error: str = ""

    def can(self, action: Action) -> bool:
        """Check if the current mode accepts ``action``."""
        return action in _MODE_TRANSITIONS.get(self.current.mode, {})

    def require(self, action: Action) -> None:
        if not self.can(action):
            allowed = [a.value for a in _MODE_TRANSITIONS.get(self.current.mode, {})]
            raise InvalidTransition(
                f"Cannot {action.value} while {self.current.mode.value}. "
                f"Allowed: {allowed}"
            )

    def transition(self, action: Action, to: ViewMode) -> None:
        """Apply ``action``, moving to ``to``.

        Raises InvalidTransition if the action is not accepted or ``to`` is
        not the mode the table prescribes for it.
        """
        self.require(action)
        expected = _MODE_TRANSITIONS[self.current.mode][action]
        if to.mode is not expected:
            raise InvalidTransition(
                f"{action.value} from {self.current.mode.value} leads to "
                f"{expected.value}, not {to.mode.value}"
            )
        self.current = to

    @property
    def is_editing(self) -> bool:
        return isinstance(self.current, Editing)

    @property
    def selected(self) -> BookRecord | None:
        return self.current.book if isinstance(self.current, Editing) else None

    @property
    def form(self) -> FormBuffer | None:
        return self.current.form if isinstance(self.current, Editing) else None
