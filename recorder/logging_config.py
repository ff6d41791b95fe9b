"""Logging setup for recording sessions.

Recorder modules log through ``recorder.*`` loggers. ``configure_logging``
owns exactly one handler on the ``recorder`` logger, found again by name, so
a host that opens several sessions in one process gets one copy of each
message. The root logger is left to the host.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from recorder.exceptions import ConfigurationError

if TYPE_CHECKING:
    from recorder.config import RecorderConfig

HANDLER_NAME = "recorder"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: str | int | None) -> int:
    """Turn ``"debug"``, ``"WARNING"``, ``10`` or ``None`` (INFO) into a level number."""
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    resolved = getattr(logging, level.strip().upper(), None)
    if not isinstance(resolved, int):
        raise ConfigurationError(f"Unknown log level: {level!r}")
    return resolved


def configure_logging(config: RecorderConfig) -> logging.Logger:
    """Point the ``recorder`` logger at the session's log destination.

    Writes to ``config.log_file`` when set, stderr otherwise. Calling it
    again replaces the handler installed by the previous call.

    Returns:
        The package logger (``recorder``).
    """

    level = resolve_level(config.log_level)
    app_logger = logging.getLogger("recorder")
    app_logger.setLevel(level)

    for existing in list(app_logger.handlers):
        if existing.get_name() == HANDLER_NAME:
            app_logger.removeHandler(existing)
            existing.close()

    handler: logging.Handler
    if config.log_file is not None:
        config.log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(config.log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, DEFAULT_DATEFMT))
    app_logger.addHandler(handler)

    app_logger.debug("Logging configured at %s", logging.getLevelName(level))
    return app_logger
