"""Editor state snapshots and the provider that captures them."""

from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Protocol, runtime_checkable

from recorder.marks import Range, SerializedMarks, Selection, ThatMark


class SnapshotField(str, Enum):
    """Optional snapshot fields, valued by their persisted name."""

    CLIPBOARD = "clipboard"
    THAT_MARK = "thatMark"
    SOURCE_MARK = "sourceMark"
    VISIBLE_RANGES = "visibleRanges"
    TIME_OFFSET_SECONDS = "timeOffsetSeconds"


@dataclass(frozen=True)
class Snapshot:
    """Point-in-time capture of a bounded subset of editor state.

    Optional fields are ``None`` when they were not captured; they are left
    out of the persisted form entirely.
    """

    __hash__ = None  # type: ignore[assignment]

    document_contents: str
    selections: list[dict[str, Any]]
    clipboard: Optional[str] = None
    visible_ranges: Optional[list[dict[str, Any]]] = None
    marks: Optional[SerializedMarks] = None
    that_mark: Optional[list[dict[str, Any]]] = None
    source_mark: Optional[list[dict[str, Any]]] = None
    time_offset_seconds: Optional[float] = None

    def has(self, snapshot_field: SnapshotField) -> bool:
        return getattr(self, _ATTRIBUTES[snapshot_field]) is not None

    def with_marks(self, marks: Optional[SerializedMarks]) -> Snapshot:
        return replace(self, marks=marks)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "documentContents": self.document_contents,
            "selections": self.selections,
        }
        optional = {
            "clipboard": self.clipboard,
            "visibleRanges": self.visible_ranges,
            "marks": self.marks,
            "thatMark": self.that_mark,
            "sourceMark": self.source_mark,
            "timeOffsetSeconds": self.time_offset_seconds,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Snapshot:
        return cls(
            document_contents=data["documentContents"],
            selections=list(data["selections"]),
            clipboard=data.get("clipboard"),
            visible_ranges=data.get("visibleRanges"),
            marks=data.get("marks"),
            that_mark=data.get("thatMark"),
            source_mark=data.get("sourceMark"),
            time_offset_seconds=data.get("timeOffsetSeconds"),
        )


_ATTRIBUTES = {
    SnapshotField.CLIPBOARD: "clipboard",
    SnapshotField.THAT_MARK: "that_mark",
    SnapshotField.SOURCE_MARK: "source_mark",
    SnapshotField.VISIBLE_RANGES: "visible_ranges",
    SnapshotField.TIME_OFFSET_SECONDS: "time_offset_seconds",
}


@dataclass(frozen=True)
class SnapshotRequest:
    """Everything a provider needs to capture one snapshot."""

    that_mark: ThatMark
    source_mark: ThatMark
    excluded_fields: frozenset[SnapshotField] = frozenset()
    extra_fields: tuple[SnapshotField, ...] = ()
    marks: Optional[SerializedMarks] = None
    start_timestamp: int = 0

    def wants(self, snapshot_field: SnapshotField) -> bool:
        return snapshot_field not in self.excluded_fields


@runtime_checkable
class SnapshotProvider(Protocol):
    """Captures editor state from the host."""

    async def take_snapshot(self, request: SnapshotRequest) -> Snapshot:
        ...


@dataclass
class EditorState:
    """Raw host state as read by an ``EditorStateSource``."""

    document_contents: str
    selections: list[Selection] = field(default_factory=list)
    clipboard: str = ""
    visible_ranges: list[Range] = field(default_factory=list)


@runtime_checkable
class EditorStateSource(Protocol):
    """Host adapter that reads the live editor state."""

    async def read_state(self) -> EditorState:
        ...


class StateSnapshotProvider:
    """``SnapshotProvider`` that filters an ``EditorStateSource`` read.

    Args:
        source: Host adapter to read editor state from.
        clock: Nanosecond clock used for ``timeOffsetSeconds``; must match
            the clock that produced the request's ``start_timestamp``.
    """

    def __init__(
        self,
        source: EditorStateSource,
        clock: Callable[[], int] = time.monotonic_ns,
    ) -> None:
        self._source = source
        self._clock = clock

    async def take_snapshot(self, request: SnapshotRequest) -> Snapshot:
        state = await self._source.read_state()

        clipboard = state.clipboard if request.wants(SnapshotField.CLIPBOARD) else None
        visible_ranges = None
        if request.wants(SnapshotField.VISIBLE_RANGES):
            visible_ranges = [r.to_dict() for r in state.visible_ranges]
        that_mark = None
        if request.wants(SnapshotField.THAT_MARK):
            that_mark = request.that_mark.to_plain_object()
        source_mark = None
        if request.wants(SnapshotField.SOURCE_MARK):
            source_mark = request.source_mark.to_plain_object()
        time_offset = None
        if SnapshotField.TIME_OFFSET_SECONDS in request.extra_fields:
            time_offset = (self._clock() - request.start_timestamp) / 1e9

        return Snapshot(
            document_contents=state.document_contents,
            selections=[s.to_dict() for s in state.selections],
            clipboard=clipboard,
            visible_ranges=visible_ranges,
            marks=request.marks,
            that_mark=that_mark,
            source_mark=source_mark,
            time_offset_seconds=time_offset,
        )
