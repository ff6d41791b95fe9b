"""Recorder exception hierarchy.

Centralised base classes so callers driving a recording can catch
recorder failures without swallowing host or provider errors.
"""


class RecorderError(Exception):
    """Root of all recorder exceptions."""


class IllegalStateError(RecorderError):
    """A test case operation was called out of lifecycle order."""


class UnknownTargetError(RecorderError, TypeError):
    """A target tree contains a variant the recorder does not know."""


class FixtureFormatError(RecorderError, ValueError):
    """A persisted fixture could not be parsed."""


class ConfigurationError(RecorderError):
    """Invalid or missing configuration."""
