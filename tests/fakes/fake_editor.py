"""Fake editor host for testing.

Provides deterministic stand-ins for the host state reader and snapshot
provider so test cases can be recorded without a running editor.
"""

from __future__ import annotations

from recorder.marks import Position, Range, Selection
from recorder.snapshot import EditorState, Snapshot, SnapshotRequest, StateSnapshotProvider


class FakeEditorStateSource:
    """Returns a fixed, mutable editor state."""

    def __init__(self, state: EditorState | None = None) -> None:
        self.state = state or EditorState(
            document_contents="hello world\n",
            selections=[Selection(Position(0, 0), Position(0, 5))],
            clipboard="clip",
            visible_ranges=[Range(Position(0, 0), Position(1, 0))],
        )
        self.reads = 0

    async def read_state(self) -> EditorState:
        self.reads += 1
        return self.state


class SpyProvider:
    """Snapshot provider that records every request it receives."""

    def __init__(self, source: FakeEditorStateSource | None = None) -> None:
        self.source = source or FakeEditorStateSource()
        self.requests: list[SnapshotRequest] = []
        self._inner = StateSnapshotProvider(self.source, clock=lambda: 2_500_000_000)

    async def take_snapshot(self, request: SnapshotRequest) -> Snapshot:
        self.requests.append(request)
        return await self._inner.take_snapshot(request)


class FailingProvider:
    """Snapshot provider whose host never settles."""

    def __init__(self, fail_on_call: int = 1) -> None:
        self.calls = 0
        self._fail_on_call = fail_on_call

    async def take_snapshot(self, request: SnapshotRequest) -> Snapshot:
        self.calls += 1
        if self.calls >= self._fail_on_call:
            raise RuntimeError("host state unavailable")
        return Snapshot(document_contents="", selections=[])
