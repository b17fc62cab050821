"""
Task Scheduler Service

Bridges task schedules onto a persistent cron trigger engine and launches the
scheduled tasks when their triggers fire.
"""

from .registrar import SchedulerRegistrar
from .engine import TriggerEngine
from .job_handler import ScheduledTaskJob
from .run_launcher import TaskLauncher, DataflowTaskLauncher
from .models import ScheduleRequest, ScheduleMetadata, ScheduleInfo, LaunchResponse
from .exceptions import (
    SchedulerError,
    MissingCronError,
    SchedulingFailure,
    EncodingError,
    DecodeError,
    JobExecutionError,
)

__all__ = [
    "SchedulerRegistrar",
    "TriggerEngine",
    "ScheduledTaskJob",
    "TaskLauncher",
    "DataflowTaskLauncher",
    "ScheduleRequest",
    "ScheduleMetadata",
    "ScheduleInfo",
    "LaunchResponse",
    "SchedulerError",
    "MissingCronError",
    "SchedulingFailure",
    "EncodingError",
    "DecodeError",
    "JobExecutionError",
]
