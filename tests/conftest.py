"""Pytest configuration and fixtures for recorder tests."""

import logging

import pytest

from recorder.marks import HatTokenMap, Position, Selection, ThatMark
from recorder.testcase import TestCaseContext
from tests.fakes.builders import make_token
from tests.fakes.fake_editor import SpyProvider


@pytest.fixture
def hat_token_map():
    """Hats over "hello" (default.h), "world" (blue.w) and "foo" (default.f)."""
    tokens = HatTokenMap()
    tokens.add_token("default", "h", make_token("hello", 0, 0))
    tokens.add_token("blue", "w", make_token("world", 0, 6))
    tokens.add_token("default", "f", make_token("foo", 1, 0))
    return tokens


@pytest.fixture
def that_mark():
    return ThatMark([Selection(Position(0, 0), Position(0, 5))])


@pytest.fixture
def source_mark():
    return ThatMark()


@pytest.fixture
def make_context(hat_token_map, that_mark, source_mark):
    def _make(*targets):
        return TestCaseContext(
            that_mark=that_mark,
            source_mark=source_mark,
            targets=list(targets),
            mark_table=hat_token_map,
        )

    return _make


@pytest.fixture
def provider():
    return SpyProvider()


@pytest.fixture
def recorder_logger():
    """The ``recorder`` logger, restored to its prior level and handlers afterwards."""
    logger = logging.getLogger("recorder")
    level = logger.level
    handlers = list(logger.handlers)
    yield logger
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)
