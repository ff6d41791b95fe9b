"""Recorded command record."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from recorder.exceptions import FixtureFormatError


@dataclass(frozen=True)
class Command:
    """A normalized command: an action name plus its arguments."""

    # Arguments are an arbitrary, possibly nested, mapping.
    __hash__ = None  # type: ignore[assignment]

    action: str
    arguments: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"action": self.action}
        data.update(self.arguments)
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Command:
        if not isinstance(data, Mapping):
            raise FixtureFormatError(f"Command must be an object, got {type(data).__name__}")
        if "action" not in data:
            raise FixtureFormatError("Command is missing required key: action")
        arguments = {k: v for k, v in data.items() if k != "action"}
        return cls(action=str(data["action"]), arguments=arguments)
