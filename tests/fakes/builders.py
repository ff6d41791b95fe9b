"""Small builders for targets and tokens used across tests."""

from recorder.marks import Position, Token
from recorder.targets import DECORATED_SYMBOL, Mark, PrimitiveTarget


def hat(color: str, character: str) -> PrimitiveTarget:
    return PrimitiveTarget(Mark(DECORATED_SYMBOL, symbol_color=color, character=character))


def mark_of(mark_type: str) -> PrimitiveTarget:
    return PrimitiveTarget(Mark(mark_type))


def make_token(text: str, line: int, start: int) -> Token:
    return Token(text, Position(line, start), Position(line, start + len(text)))
