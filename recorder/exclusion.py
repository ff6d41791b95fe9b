"""Which snapshot fields a command's fixture should leave out.

Each optional field is governed by one ``ExclusionRule``; a field is omitted
when its rule's predicate holds for the command being recorded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Sequence

from recorder.command import Command
from recorder.config import CLIPBOARD_ACTIONS, VISIBLE_RANGE_ACTIONS
from recorder.snapshot import SnapshotField
from recorder.targets import SOURCE, THAT, Target, includes_mark_of_type


@dataclass(frozen=True)
class ExclusionContext:
    command: Command
    initial_snapshot: bool
    full_targets: Sequence[Target]
    clipboard_actions: frozenset[str] = CLIPBOARD_ACTIONS
    visible_range_actions: frozenset[str] = VISIBLE_RANGE_ACTIONS

    def references(self, mark_type: str) -> bool:
        return any(includes_mark_of_type(t, mark_type) for t in self.full_targets)


@dataclass(frozen=True)
class ExclusionRule:
    field: SnapshotField
    omit_when: Callable[[ExclusionContext], bool]


# The final snapshot keeps thatMark/sourceMark: the command may have set them.
EXCLUSION_RULES: tuple[ExclusionRule, ...] = (
    ExclusionRule(
        SnapshotField.CLIPBOARD,
        lambda ctx: ctx.command.action not in ctx.clipboard_actions,
    ),
    ExclusionRule(
        SnapshotField.THAT_MARK,
        lambda ctx: ctx.initial_snapshot and not ctx.references(THAT),
    ),
    ExclusionRule(
        SnapshotField.SOURCE_MARK,
        lambda ctx: ctx.initial_snapshot and not ctx.references(SOURCE),
    ),
    ExclusionRule(
        SnapshotField.VISIBLE_RANGES,
        lambda ctx: ctx.command.action not in ctx.visible_range_actions,
    ),
)


def get_excluded_fields(
    command: Command,
    initial_snapshot: bool,
    full_targets: Iterable[Target],
    *,
    clipboard_actions: frozenset[str] = CLIPBOARD_ACTIONS,
    visible_range_actions: frozenset[str] = VISIBLE_RANGE_ACTIONS,
    rules: Sequence[ExclusionRule] = EXCLUSION_RULES,
) -> frozenset[SnapshotField]:
    """Return the snapshot fields to omit for ``command``."""
    ctx = ExclusionContext(
        command=command,
        initial_snapshot=initial_snapshot,
        full_targets=tuple(full_targets),
        clipboard_actions=clipboard_actions,
        visible_range_actions=visible_range_actions,
    )
    return frozenset(rule.field for rule in rules if rule.omit_when(ctx))
