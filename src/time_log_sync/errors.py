"""Exceptions raised by time log synchronizer."""

from typing import Any


class TimeSyncError(Exception):
    """Base class for synchronizer errors."""


class ConfigError(TimeSyncError):
    """Configuration is missing or inconsistent."""


class TimeLogError(TimeSyncError):
    """Local time log is unreadable or malformed."""


class DateRangeError(TimeSyncError):
    """A local entry lies outside the requested date range."""


class TaskResolutionError(TimeSyncError):
    """A service label or task id could not be resolved to exactly one task."""


class EntryBatchError(TimeSyncError):
    """One or more entries in a batch of remote calls failed."""

    def __init__(self, action: str, failures: list[tuple[Any, BaseException]]) -> None:
        self.action = action
        self.failures = failures
        super().__init__(f"Failed to {action} {len(failures)} entries: {failures[0][1]}")
