"""Marks and target trees.

A target is a closed tagged union of three frozen records:

- ``PrimitiveTarget`` wraps a single ``Mark``
- ``ListTarget`` holds an ordered tuple of targets
- ``RangeTarget`` pairs an ``anchor`` and an ``active`` target

Every traversal here matches all three variants explicitly and raises
``UnknownTargetError`` for anything else, so a new variant cannot be
silently classified as "references nothing".
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Mapping, Union

from recorder.exceptions import UnknownTargetError

DECORATED_SYMBOL = "decoratedSymbol"
THAT = "that"
SOURCE = "source"


def get_key(hat_style: str, character: str) -> str:
    return f"{hat_style}.{character}"


def split_key(key: str) -> tuple[str, str]:
    """Inverse of ``get_key``. The character may itself be a dot."""
    hat_style, sep, character = key.partition(".")
    if not sep:
        raise ValueError(f"Malformed mark key: {key!r}")
    return hat_style, character


@dataclass(frozen=True)
class Mark:
    type: str
    symbol_color: str | None = None
    character: str | None = None

    @property
    def key(self) -> str | None:
        """Mark key for decorated symbols, ``None`` for every other mark."""
        if self.type != DECORATED_SYMBOL or self.symbol_color is None or self.character is None:
            return None
        return get_key(self.symbol_color, self.character)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.type}
        if self.symbol_color is not None:
            data["symbolColor"] = self.symbol_color
        if self.character is not None:
            data["character"] = self.character
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Mark:
        return cls(
            type=str(data["type"]),
            symbol_color=data.get("symbolColor"),
            character=data.get("character"),
        )


@dataclass(frozen=True)
class PrimitiveTarget:
    mark: Mark


@dataclass(frozen=True)
class ListTarget:
    elements: tuple[Target, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "elements", tuple(self.elements))


@dataclass(frozen=True)
class RangeTarget:
    anchor: Target
    active: Target


Target = Union[PrimitiveTarget, ListTarget, RangeTarget]


def _children(target: Target) -> tuple[Target, ...]:
    if isinstance(target, ListTarget):
        return target.elements
    if isinstance(target, RangeTarget):
        return (target.anchor, target.active)
    raise UnknownTargetError(f"Unknown target variant: {type(target).__name__}")


def includes_mark_of_type(target: Target, mark_type: str) -> bool:
    """Return True if any primitive leaf of ``target`` has a mark of ``mark_type``."""
    if isinstance(target, PrimitiveTarget):
        return target.mark.type == mark_type
    return any(includes_mark_of_type(child, mark_type) for child in _children(target))


def iter_marks(target: Target) -> Iterator[Mark]:
    """Yield the marks of every primitive leaf, depth first, anchor before active."""
    if isinstance(target, PrimitiveTarget):
        yield target.mark
        return
    for child in _children(target):
        yield from iter_marks(child)


def extract_target_keys(target: Target) -> list[str]:
    """Ordered, de-duplicated mark keys referenced by ``target``."""
    return extract_all_target_keys([target])


def extract_all_target_keys(targets: Iterable[Target]) -> list[str]:
    keys: dict[str, None] = {}
    for target in targets:
        for mark in iter_marks(target):
            key = mark.key
            if key is not None:
                keys.setdefault(key, None)
    return list(keys)


def target_to_dict(target: Target) -> dict[str, Any]:
    if isinstance(target, PrimitiveTarget):
        return {"type": "primitive", "mark": target.mark.to_dict()}
    if isinstance(target, ListTarget):
        return {"type": "list", "elements": [target_to_dict(e) for e in target.elements]}
    if isinstance(target, RangeTarget):
        return {
            "type": "range",
            "anchor": target_to_dict(target.anchor),
            "active": target_to_dict(target.active),
        }
    raise UnknownTargetError(f"Unknown target variant: {type(target).__name__}")


def target_from_dict(data: Mapping[str, Any]) -> Target:
    if not isinstance(data, Mapping):
        raise UnknownTargetError(f"Target must be an object, got {type(data).__name__}")
    kind = data.get("type")
    if kind == "primitive":
        return PrimitiveTarget(Mark.from_dict(data["mark"]))
    if kind == "list":
        return ListTarget(target_from_dict(e) for e in data["elements"])
    if kind == "range":
        return RangeTarget(
            anchor=target_from_dict(data["anchor"]),
            active=target_from_dict(data["active"]),
        )
    raise UnknownTargetError(f"Unknown target type: {kind!r}")
