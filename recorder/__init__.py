"""Command fixture recorder.

This package provides:
- A ``TestCase`` orchestrator that snapshots editor state around one command
- A declarative field exclusion policy deciding which state a fixture keeps
- Target tree helpers for finding the marks a command depends on
- A stable JSON fixture format and a session driver that writes fixtures
"""

from recorder.command import Command
from recorder.exceptions import (
    ConfigurationError,
    FixtureFormatError,
    IllegalStateError,
    RecorderError,
    UnknownTargetError,
)
from recorder.exclusion import get_excluded_fields
from recorder.fixture import Fixture, load_fixture, serialize_fixture
from recorder.marks import HatTokenMap, Position, Range, Selection, ThatMark, Token
from recorder.snapshot import (
    EditorState,
    Snapshot,
    SnapshotField,
    SnapshotProvider,
    SnapshotRequest,
    StateSnapshotProvider,
)
from recorder.targets import (
    ListTarget,
    Mark,
    PrimitiveTarget,
    RangeTarget,
    extract_target_keys,
    includes_mark_of_type,
)
from recorder.testcase import RecordingState, TestCase, TestCaseContext

__all__ = [
    "Command",
    "ConfigurationError",
    "EditorState",
    "Fixture",
    "FixtureFormatError",
    "HatTokenMap",
    "IllegalStateError",
    "ListTarget",
    "Mark",
    "Position",
    "PrimitiveTarget",
    "Range",
    "RangeTarget",
    "RecorderError",
    "RecordingState",
    "Selection",
    "Snapshot",
    "SnapshotField",
    "SnapshotProvider",
    "SnapshotRequest",
    "StateSnapshotProvider",
    "TestCase",
    "TestCaseContext",
    "ThatMark",
    "Token",
    "UnknownTargetError",
    "extract_target_keys",
    "get_excluded_fields",
    "includes_mark_of_type",
    "load_fixture",
    "serialize_fixture",
]
