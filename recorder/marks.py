"""Hat tokens and the mark table.

The host assigns a hat (a decoration of some style over one character) to
tokens in the visible document. The recorder only reads that assignment
through the ``MarkTable`` protocol; ``HatTokenMap`` is an in-memory table
used by drivers that already hold the assignment and by tests.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional, Protocol, runtime_checkable

from recorder.targets import get_key, split_key

logger = logging.getLogger(__name__)

SerializedMarks = dict[str, Optional[dict[str, Any]]]


@dataclass(frozen=True)
class Position:
    line: int
    character: int

    def to_dict(self) -> dict[str, int]:
        return {"line": self.line, "character": self.character}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Position:
        return cls(line=int(data["line"]), character=int(data["character"]))


@dataclass(frozen=True)
class Token:
    """A document token that can carry a hat."""

    text: str
    start: Position
    end: Position

    def to_range_dict(self) -> dict[str, Any]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}


@runtime_checkable
class MarkTable(Protocol):
    """Read-only view of the host's hat assignment."""

    def entries(self) -> Iterable[tuple[str, Token]]:
        """All (mark key, token) pairs currently assigned."""
        ...

    def get_token(self, hat_style: str, character: str) -> Token | None:
        ...


class HatTokenMap:
    """Dictionary-backed ``MarkTable``."""

    def __init__(self, tokens: Mapping[str, Token] | None = None) -> None:
        self._tokens: dict[str, Token] = dict(tokens or {})

    def add_token(self, hat_style: str, character: str, token: Token) -> None:
        self._tokens[get_key(hat_style, character)] = token

    def entries(self) -> Iterable[tuple[str, Token]]:
        return list(self._tokens.items())

    def get_token(self, hat_style: str, character: str) -> Token | None:
        return self._tokens.get(get_key(hat_style, character))

    def __len__(self) -> int:
        return len(self._tokens)


def extract_targeted_marks(keys: Iterable[str], mark_table: MarkTable) -> dict[str, Token | None]:
    """Look up the token behind each key; unassigned keys map to ``None``."""
    marks: dict[str, Token | None] = {}
    for key in keys:
        hat_style, character = split_key(key)
        token = mark_table.get_token(hat_style, character)
        if token is None:
            logger.warning("No token assigned to mark %s", key)
        marks[key] = token
    return marks


def all_marks(mark_table: MarkTable) -> dict[str, Token | None]:
    return dict(mark_table.entries())


def marks_to_plain_object(marks: Mapping[str, Token | None]) -> SerializedMarks:
    return {
        key: (token.to_range_dict() if token is not None else None) for key, token in marks.items()
    }


@dataclass(frozen=True)
class Range:
    start: Position
    end: Position

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}


@dataclass(frozen=True)
class Selection:
    anchor: Position
    active: Position

    def to_dict(self) -> dict[str, Any]:
        return {"anchor": self.anchor.to_dict(), "active": self.active.to_dict()}


class ThatMark:
    """Holder for the selections a previous command left behind ("that" / "source")."""

    def __init__(self, selections: Iterable[Selection] | None = None) -> None:
        self._selections: list[Selection] | None = None
        if selections is not None:
            self.set(selections)

    def set(self, selections: Iterable[Selection] | None) -> None:
        self._selections = list(selections) if selections is not None else None

    def get(self) -> list[Selection] | None:
        return list(self._selections) if self._selections is not None else None

    def exists(self) -> bool:
        return self._selections is not None

    def to_plain_object(self) -> list[dict[str, Any]] | None:
        if self._selections is None:
            return None
        return [selection.to_dict() for selection in self._selections]
