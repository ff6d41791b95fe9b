"""Recording of a single command execution as a fixture.

A ``TestCase`` is created per command and driven strictly in order::

    test_case = TestCase(command, context, snapshot_provider=provider, ...)
    await test_case.record_initial_state()
    return_value = await run(command)
    await test_case.record_final_state(return_value)
    test_case.filter_marks(next_command, next_context)  # hat token map tests only
    text = test_case.serialize()

Hat token map tests record the entire hat assignment, since the assignment
itself is what is under test. Which hats matter is only known once the
follow-up command arrives, so such a test case reports
``awaiting_final_mark_info`` until ``filter_marks`` narrows both snapshots.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Sequence

from recorder.command import Command
from recorder.config import CLIPBOARD_ACTIONS, VISIBLE_RANGE_ACTIONS
from recorder.exceptions import IllegalStateError
from recorder.exclusion import get_excluded_fields
from recorder.fixture import Fixture, serialize_fixture
from recorder.marks import (
    MarkTable,
    SerializedMarks,
    ThatMark,
    all_marks,
    extract_targeted_marks,
    marks_to_plain_object,
)
from recorder.snapshot import Snapshot, SnapshotField, SnapshotProvider, SnapshotRequest
from recorder.targets import Target, extract_all_target_keys

logger = logging.getLogger(__name__)


class RecordingState(Enum):
    CREATED = "created"
    INITIAL_RECORDED = "initial_recorded"
    FINAL_RECORDED = "final_recorded"
    MARKS_FILTERED = "marks_filtered"
    SERIALIZED = "serialized"


@dataclass(frozen=True)
class TestCaseContext:
    """Host state a command was resolved against."""

    __test__ = False

    that_mark: ThatMark
    source_mark: ThatMark
    targets: Sequence[Target]
    mark_table: MarkTable


class TestCase:
    __test__ = False

    def __init__(
        self,
        command: Command,
        context: TestCaseContext,
        *,
        snapshot_provider: SnapshotProvider,
        language_id: str,
        start_timestamp: int = 0,
        is_hat_token_map_test: bool = False,
        extra_snapshot_fields: Iterable[SnapshotField] = (),
        clipboard_actions: frozenset[str] = CLIPBOARD_ACTIONS,
        visible_range_actions: frozenset[str] = VISIBLE_RANGE_ACTIONS,
    ) -> None:
        self.command = command
        self.language_id = language_id
        self.full_targets: tuple[Target, ...] = tuple(context.targets)
        self.target_keys: list[str] = extract_all_target_keys(self.full_targets)
        self.initial_state: Optional[Snapshot] = None
        self.final_state: Optional[Snapshot] = None
        self.return_value: Any = None
        self.marks_to_check: Optional[list[str]] = None
        self.state = RecordingState.CREATED

        self._context = context
        self._provider = snapshot_provider
        self._start_timestamp = start_timestamp
        self._is_hat_token_map_test = is_hat_token_map_test
        self._extra_snapshot_fields = tuple(extra_snapshot_fields)
        self._clipboard_actions = clipboard_actions
        self._visible_range_actions = visible_range_actions
        self._awaiting_final_mark_info = is_hat_token_map_test

    @property
    def is_hat_token_map_test(self) -> bool:
        return self._is_hat_token_map_test

    @property
    def awaiting_final_mark_info(self) -> bool:
        return self._awaiting_final_mark_info

    def get_excluded_fields(self, *, initial_snapshot: bool) -> frozenset[SnapshotField]:
        return get_excluded_fields(
            self.command,
            initial_snapshot,
            self.full_targets,
            clipboard_actions=self._clipboard_actions,
            visible_range_actions=self._visible_range_actions,
        )

    def _get_marks(self) -> SerializedMarks:
        mark_table = self._context.mark_table
        if self._is_hat_token_map_test:
            # Filtered later against the follow-up command.
            marks = all_marks(mark_table)
        else:
            marks = extract_targeted_marks(self.target_keys, mark_table)
        return marks_to_plain_object(marks)

    def _request(
        self, excluded: frozenset[SnapshotField], marks: Optional[SerializedMarks]
    ) -> SnapshotRequest:
        return SnapshotRequest(
            that_mark=self._context.that_mark,
            source_mark=self._context.source_mark,
            excluded_fields=excluded,
            extra_fields=self._extra_snapshot_fields,
            marks=marks,
            start_timestamp=self._start_timestamp,
        )

    async def record_initial_state(self) -> None:
        if self.state is not RecordingState.CREATED:
            raise IllegalStateError(f"Initial state already recorded ({self.state.value})")
        excluded = self.get_excluded_fields(initial_snapshot=True)
        self.initial_state = await self._provider.take_snapshot(
            self._request(excluded, self._get_marks())
        )
        self.state = RecordingState.INITIAL_RECORDED
        logger.debug(
            "Recorded initial state for %s (excluded: %s)",
            self.command.action,
            sorted(f.value for f in excluded),
        )

    async def record_final_state(self, return_value: Any) -> None:
        if self.state is not RecordingState.INITIAL_RECORDED:
            raise IllegalStateError(
                f"Final state requires a recorded initial state ({self.state.value})"
            )
        excluded = self.get_excluded_fields(initial_snapshot=False)
        marks = self._get_marks() if self._is_hat_token_map_test else None
        self.final_state = await self._provider.take_snapshot(self._request(excluded, marks))
        self.return_value = return_value
        self.state = RecordingState.FINAL_RECORDED
        logger.debug("Recorded final state for %s", self.command.action)

    def filter_marks(self, command: Command, context: TestCaseContext) -> None:
        """Narrow both snapshots to the hats this and the follow-up command use."""
        if self.state is not RecordingState.FINAL_RECORDED:
            raise IllegalStateError(
                f"Marks can only be filtered once, after the final state ({self.state.value})"
            )

        marks_to_check = extract_all_target_keys(context.targets)
        keys = list(dict.fromkeys([*self.target_keys, *marks_to_check]))

        self.initial_state = self.initial_state.with_marks(
            _pick(self.initial_state.marks, keys)
        )
        self.final_state = self.final_state.with_marks(_pick(self.final_state.marks, keys))
        self.marks_to_check = marks_to_check
        self._awaiting_final_mark_info = False
        self.state = RecordingState.MARKS_FILTERED
        logger.debug(
            "Filtered marks for %s using follow-up %s: %s",
            self.command.action,
            command.action,
            keys,
        )

    def to_fixture(self) -> Fixture:
        if self.initial_state is None or self.final_state is None:
            raise IllegalStateError("Two snapshots must be taken before serializing")
        return Fixture(
            language_id=self.language_id,
            command=self.command,
            marks_to_check=tuple(self.marks_to_check) if self.marks_to_check is not None else None,
            initial_state=self.initial_state,
            final_state=self.final_state,
            return_value=self.return_value,
            full_targets=self.full_targets,
        )

    def serialize(self, *, indent: bool = True) -> str:
        text = serialize_fixture(self.to_fixture(), indent=indent)
        self.state = RecordingState.SERIALIZED
        return text


def _pick(marks: Optional[SerializedMarks], keys: Sequence[str]) -> SerializedMarks:
    source = marks or {}
    missing = [key for key in keys if key not in source]
    if missing:
        logger.warning("Marks missing from snapshot: %s", missing)
    return {key: source.get(key) for key in keys}
