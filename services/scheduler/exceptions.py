"""
Errors raised by the scheduler service.
"""

from typing import Optional, Sequence


class SchedulerError(Exception):
    """Base class for all scheduler errors."""


class MissingCronError(SchedulerError, ValueError):
    """None of the accepted deployment properties holds a cron expression."""

    def __init__(self, keys: Sequence[str]):
        self.keys = tuple(keys)
        super().__init__(
            "Cron expression must be specified in deployment properties using one of: "
            + ", ".join(self.keys)
        )


class SchedulingFailure(SchedulerError):
    """Creating, replacing or deleting a schedule failed."""

    def __init__(self, schedule_name: str, cause: Optional[BaseException] = None, action: str = "schedule"):
        self.schedule_name = schedule_name
        self.cause = cause
        message = f"Failed to {action} task {schedule_name}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class EncodingError(SchedulerError):
    """Schedule metadata could not be serialized."""


class DecodeError(SchedulerError):
    """A persisted metadata payload is malformed or incomplete."""


class JobExecutionError(SchedulerError):
    """A single fire of a scheduled job failed."""

    def __init__(self, schedule_name: str, cause: Optional[BaseException] = None):
        self.schedule_name = schedule_name
        self.cause = cause
        message = f"Failed to launch scheduled task {schedule_name}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
