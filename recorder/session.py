"""Recording session: drives test cases and persists their fixtures."""

from __future__ import annotations

import logging
import re
import time
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional

from recorder.command import Command
from recorder.config import RecorderConfig
from recorder.exceptions import IllegalStateError
from recorder.logging_config import configure_logging
from recorder.snapshot import SnapshotProvider
from recorder.testcase import TestCase, TestCaseContext

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


class FixtureStore:
    """Writes fixture text to ``<root>/<action>/<action><n>.json``."""

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def write(self, action: str, text: str) -> Path:
        name = _UNSAFE_CHARS.sub("_", action) or "command"
        directory = self._root / name
        directory.mkdir(parents=True, exist_ok=True)
        index = 1
        while (directory / f"{name}{index}.json").exists():
            index += 1
        path = directory / f"{name}{index}.json"
        path.write_text(text, encoding="utf-8", newline="\n")
        logger.info("Wrote fixture %s", path)
        return path


class RecordingSession:
    """Records every command it is given, one at a time.

    Hat token map test cases are held back until the next command arrives,
    since that command decides which hats the fixture checks.
    """

    def __init__(
        self,
        config: RecorderConfig,
        snapshot_provider: SnapshotProvider,
        store: Optional[FixtureStore] = None,
        clock: Callable[[], int] = time.monotonic_ns,
    ) -> None:
        self._config = config
        self._provider = snapshot_provider
        self._store = store or FixtureStore(config.fixture_root)
        self._clock = clock
        self._pending: Optional[TestCase] = None
        self._active = False
        self.written: list[Path] = []

    @classmethod
    def from_config(
        cls, config: RecorderConfig, snapshot_provider: SnapshotProvider
    ) -> RecordingSession:
        """Open a session with logging and fixture storage taken from ``config``."""
        configure_logging(config)
        session = cls(config, snapshot_provider)
        logger.info(
            "Recording session started (fixtures: %s, hat token map test: %s)",
            config.fixture_root,
            config.is_hat_token_map_test,
        )
        return session

    @property
    def pending(self) -> Optional[TestCase]:
        return self._pending

    async def record(
        self,
        command: Command,
        context: TestCaseContext,
        execute: Callable[[Command], Awaitable[Any]],
        *,
        language_id: str,
    ) -> TestCase:
        """Record ``command`` while ``execute`` runs it against the host."""
        if self._active:
            raise IllegalStateError("A command is already being recorded")

        if self._pending is not None:
            self._pending.filter_marks(command, context)
            self._persist(self._pending)
            self._pending = None

        test_case = TestCase(
            command,
            context,
            snapshot_provider=self._provider,
            language_id=language_id,
            start_timestamp=self._clock(),
            is_hat_token_map_test=self._config.is_hat_token_map_test,
            extra_snapshot_fields=self._config.extra_snapshot_fields,
            clipboard_actions=self._config.clipboard_actions,
            visible_range_actions=self._config.visible_range_actions,
        )

        self._active = True
        try:
            await test_case.record_initial_state()
            return_value = await execute(command)
            await test_case.record_final_state(return_value)
        finally:
            self._active = False

        if test_case.awaiting_final_mark_info:
            self._pending = test_case
        else:
            self._persist(test_case)
        return test_case

    def finish(self) -> None:
        """End the session, dropping any fixture still waiting on mark info."""
        if self._pending is not None:
            logger.warning(
                "Discarding %s fixture: no follow-up command to select marks",
                self._pending.command.action,
            )
            self._pending = None

    def _persist(self, test_case: TestCase) -> Path:
        text = test_case.serialize(indent=self._config.indent)
        path = self._store.write(test_case.command.action, text)
        self.written.append(path)
        return path
