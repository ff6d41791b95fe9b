"""Fixture records and their persisted JSON form.

Fields are written in a fixed order so that re-recording an unchanged
command produces byte-identical output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import orjson

from recorder.command import Command
from recorder.exceptions import FixtureFormatError
from recorder.snapshot import Snapshot
from recorder.targets import Target, target_from_dict, target_to_dict

FIXTURE_FIELDS = (
    "languageId",
    "command",
    "marksToCheck",
    "initialState",
    "finalState",
    "returnValue",
    "fullTargets",
)


@dataclass(frozen=True)
class Fixture:
    """One recorded command with its before/after snapshots."""

    # Snapshots and return values hold lists and dicts.
    __hash__ = None  # type: ignore[assignment]

    language_id: str
    command: Command
    initial_state: Snapshot
    final_state: Snapshot
    return_value: Any
    full_targets: tuple[Target, ...]
    marks_to_check: Optional[tuple[str, ...]] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "languageId": self.language_id,
            "command": self.command.to_dict(),
        }
        if self.marks_to_check is not None:
            data["marksToCheck"] = list(self.marks_to_check)
        data["initialState"] = self.initial_state.to_dict()
        data["finalState"] = self.final_state.to_dict()
        data["returnValue"] = self.return_value
        data["fullTargets"] = [target_to_dict(t) for t in self.full_targets]
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Fixture:
        missing = [
            name for name in FIXTURE_FIELDS if name != "marksToCheck" and name not in data
        ]
        if missing:
            raise FixtureFormatError(f"Fixture missing required keys: {', '.join(missing)}")
        unknown = sorted(set(data) - set(FIXTURE_FIELDS))
        if unknown:
            raise FixtureFormatError(f"Fixture has unknown keys: {', '.join(unknown)}")

        marks_to_check = data.get("marksToCheck")
        try:
            return cls(
                language_id=str(data["languageId"]),
                command=Command.from_dict(data["command"]),
                initial_state=Snapshot.from_dict(data["initialState"]),
                final_state=Snapshot.from_dict(data["finalState"]),
                return_value=data["returnValue"],
                full_targets=tuple(target_from_dict(t) for t in data["fullTargets"]),
                marks_to_check=tuple(marks_to_check) if marks_to_check is not None else None,
            )
        except (AttributeError, KeyError, TypeError) as exc:
            raise FixtureFormatError(f"Malformed fixture: {exc}") from exc


def _encode_extra(value: Any) -> Any:
    """Encode values orjson has no native form for."""
    if isinstance(value, (set, frozenset)):
        try:
            return sorted(value)
        except TypeError:
            return sorted(value, key=repr)
    raise TypeError(f"Type is not JSON serializable: {type(value).__name__}")


def serialize_fixture(fixture: Fixture, *, indent: bool = True) -> str:
    option = orjson.OPT_APPEND_NEWLINE
    if indent:
        option |= orjson.OPT_INDENT_2
    try:
        payload = orjson.dumps(fixture.to_dict(), default=_encode_extra, option=option)
    except orjson.JSONEncodeError as exc:
        raise FixtureFormatError(f"Fixture is not serializable: {exc}") from exc
    return payload.decode("utf-8")


def load_fixture(text: str | bytes) -> Fixture:
    try:
        data = orjson.loads(text)
    except orjson.JSONDecodeError as exc:
        raise FixtureFormatError(f"Invalid fixture JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise FixtureFormatError("Fixture must be a JSON object")
    return Fixture.from_dict(data)
