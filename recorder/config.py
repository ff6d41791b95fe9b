"""Recorder configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from recorder.exceptions import ConfigurationError
from recorder.snapshot import SnapshotField

# Actions whose behaviour depends on the clipboard.
CLIPBOARD_ACTIONS = frozenset({"copy", "paste"})

# Actions that move the viewport.
VISIBLE_RANGE_ACTIONS = frozenset(
    {"fold", "unfold", "scrollToBottom", "scrollToCenter", "scrollToTop"}
)

DEFAULT_FIXTURE_ROOT = Path("fixtures/recorded")

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class RecorderConfig:
    """Configuration toggles for a recording session.

    Attributes:
        fixture_root: Directory fixtures are written under.
        is_hat_token_map_test: Record the whole hat assignment and wait for a
            follow-up command before finalizing each fixture.
        extra_snapshot_fields: Opt-in snapshot fields such as
            ``timeOffsetSeconds``.
        clipboard_actions: Actions that keep the clipboard in snapshots.
        visible_range_actions: Actions that keep visible ranges in snapshots.
        indent: Pretty-print persisted fixtures.
        log_level: Level name for the ``recorder`` logger; INFO when unset.
        log_file: Session log destination; stderr when unset.
    """

    fixture_root: Path = DEFAULT_FIXTURE_ROOT
    is_hat_token_map_test: bool = False
    extra_snapshot_fields: tuple[SnapshotField, ...] = ()
    clipboard_actions: frozenset[str] = CLIPBOARD_ACTIONS
    visible_range_actions: frozenset[str] = VISIBLE_RANGE_ACTIONS
    indent: bool = True
    log_level: Optional[str] = None
    log_file: Optional[Path] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> RecorderConfig:
        env = os.environ if environ is None else environ
        config = cls()
        root = env.get("RECORDER_FIXTURE_ROOT")
        if root:
            config.fixture_root = Path(root)
        config.is_hat_token_map_test = (
            env.get("RECORDER_HAT_TOKEN_MAP_TEST", "").strip().lower() in _TRUTHY
        )
        raw_extra = env.get("RECORDER_EXTRA_FIELDS", "")
        config.extra_snapshot_fields = parse_extra_fields(raw_extra)
        config.log_level = env.get("RECORDER_LOG_LEVEL") or None
        log_file = env.get("RECORDER_LOG_FILE")
        if log_file:
            config.log_file = Path(log_file)
        return config


def parse_extra_fields(raw: str) -> tuple[SnapshotField, ...]:
    """Parse a comma separated list of persisted snapshot field names."""
    fields = []
    for name in (part.strip() for part in raw.split(",")):
        if not name:
            continue
        try:
            fields.append(SnapshotField(name))
        except ValueError as exc:
            raise ConfigurationError(f"Unknown snapshot field: {name!r}") from exc
    return tuple(fields)
