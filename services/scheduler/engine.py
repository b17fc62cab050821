"""
Trigger engine backed by APScheduler.

Jobs are stored under the schedule name and always reference the module level
``run_job`` function by its textual name, so that they can be persisted in a
database job store and picked up again after a restart. At fire time ``run_job``
looks up the engine registered under the name the job was created with and
hands the metadata payload to that engine's job handler.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from apscheduler.events import (
    EVENT_JOB_ERROR,
    EVENT_JOB_EXECUTED,
    EVENT_JOB_MAX_INSTANCES,
    EVENT_JOB_MISSED,
)
from apscheduler.executors.pool import ThreadPoolExecutor
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.jobstores.sqlalchemy import SQLAlchemyJobStore
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.schedulers.base import STATE_PAUSED
from apscheduler.triggers.cron import CronTrigger

from .cron_utils import parse_cron_expression
from .exceptions import JobExecutionError

logger = logging.getLogger(__name__)

JOB_FUNC_REF = f"{__name__}:run_job"
METADATA_KEY = "properties"

SUPPORTED_DATABASES = ("postgresql", "mysql", "mariadb", "sqlite")

_engines: Dict[str, "TriggerEngine"] = {}
_engines_lock = threading.Lock()


@dataclass(frozen=True)
class JobRecord:
    """A job identity together with its opaque metadata payload."""

    identity: str
    metadata: str


class CronExpressionTrigger(CronTrigger):
    """CronTrigger that remembers the expression it was built from."""

    def __init__(self, expression: str, timezone=None):
        self.expression = expression
        super().__init__(timezone=timezone, **parse_cron_expression(expression))

    def __getstate__(self):
        state = super().__getstate__()
        state["expression"] = self.expression
        return state

    def __setstate__(self, state):
        state = dict(state)
        self.expression = state.pop("expression", None)
        super().__setstate__(state)

    def __str__(self):
        return f"cron[{self.expression}]"

    def __repr__(self):
        return f"<{self.__class__.__name__} ({self.expression!r}, timezone='{self.timezone}')>"


def check_jobstore_url(url: str) -> str:
    """
    Return the database dialect of a job store URL.

    Raises:
        ValueError: If the URL points to an unsupported database
    """
    dialect = url.split(":", 1)[0].split("+", 1)[0].lower()
    if dialect not in SUPPORTED_DATABASES:
        raise ValueError(
            f"Unsupported database type '{dialect}'. "
            f"Supported databases: {', '.join(SUPPORTED_DATABASES)}"
        )
    return dialect


def run_job(engine_name: str, schedule_name: str, properties: Optional[str] = None):
    """Entry point of every fire; dispatches to the owning engine's job handler."""
    with _engines_lock:
        engine = _engines.get(engine_name)

    if engine is None or engine.job_handler is None:
        logger.error(f"No job handler registered for engine {engine_name}, schedule {schedule_name}")
        raise JobExecutionError(schedule_name, RuntimeError(f"No job handler registered for engine {engine_name}"))

    return engine.job_handler.execute(schedule_name, properties)


class TriggerEngine:
    """Persistent cron trigger engine used by the scheduler registrar."""

    def __init__(
        self,
        name: str = "task-scheduler",
        job_handler=None,
        jobstore_url: Optional[str] = None,
        jobstore_tablename: str = "scheduled_jobs",
        pool_size: int = 10,
        timezone: str = "UTC",
        misfire_grace_time: Optional[int] = 60,
        wait_for_jobs_on_shutdown: bool = True
    ):
        """
        Initialize the trigger engine.

        Args:
            name: Name jobs are registered under; must be stable across restarts
            job_handler: Object with an ``execute(schedule_name, properties)`` method
            jobstore_url: SQLAlchemy URL of the job store, in-memory when None
            jobstore_tablename: Table holding persisted jobs
            pool_size: Number of worker threads
            timezone: Timezone cron expressions are evaluated in
            misfire_grace_time: Seconds a late fire may still run
            wait_for_jobs_on_shutdown: Wait for running fires when shutting down
        """
        self.name = name
        self.job_handler = job_handler
        self.pool_size = pool_size
        self.timezone = timezone
        self.wait_for_jobs_on_shutdown = wait_for_jobs_on_shutdown

        self.scheduler = BackgroundScheduler(
            jobstores={"default": self._create_jobstore(jobstore_url, jobstore_tablename)},
            executors={"default": ThreadPoolExecutor(pool_size)},
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
                "misfire_grace_time": misfire_grace_time,
            },
            timezone=timezone,
        )
        self.scheduler.add_listener(
            self._on_job_event,
            EVENT_JOB_EXECUTED | EVENT_JOB_ERROR | EVENT_JOB_MAX_INSTANCES | EVENT_JOB_MISSED
        )

        with _engines_lock:
            _engines[name] = self

    @staticmethod
    def _create_jobstore(jobstore_url: Optional[str], tablename: str):
        if not jobstore_url:
            return MemoryJobStore()

        dialect = check_jobstore_url(jobstore_url)
        logger.info(f"Using {dialect} job store, table {tablename}")
        return SQLAlchemyJobStore(url=jobstore_url, tablename=tablename)

    @property
    def running(self) -> bool:
        return self.scheduler.running

    @property
    def paused(self) -> bool:
        return self.scheduler.state == STATE_PAUSED

    @property
    def exclusive_execution(self) -> bool:
        """Whether fires of the same job may never overlap."""
        return getattr(self.job_handler, "disallow_concurrent_execution", True)

    def start(self, paused: bool = False):
        """Start the engine; a paused engine stores jobs but fires nothing."""
        if self.scheduler.running:
            logger.warning(f"Trigger engine {self.name} is already running")
            return

        self.scheduler.start(paused=paused)
        logger.info(f"Trigger engine {self.name} started{' (paused)' if paused else ''}")

    def resume(self):
        """Let a paused engine fire its triggers."""
        if not self.paused:
            logger.warning(f"Trigger engine {self.name} is not paused")
            return

        self.scheduler.resume()
        logger.info(f"Trigger engine {self.name} resumed")

    def shutdown(self, wait: Optional[bool] = None):
        """Stop the engine. Running fires are waited for unless told otherwise."""
        if wait is None:
            wait = self.wait_for_jobs_on_shutdown

        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)
            logger.info(f"Trigger engine {self.name} stopped")

        with _engines_lock:
            if _engines.get(self.name) is self:
                del _engines[self.name]

    def job_exists(self, identity: str) -> bool:
        return self.scheduler.get_job(identity) is not None

    def delete_job(self, identity: str):
        """Delete a job together with its trigger."""
        self.scheduler.remove_job(identity)
        logger.debug(f"Deleted job {identity}")

    def create_job(self, identity: str, metadata: str) -> JobRecord:
        return JobRecord(identity=identity, metadata=metadata)

    def create_cron_trigger(self, cron_expression: str) -> CronExpressionTrigger:
        """
        Build a cron trigger.

        Raises:
            ValueError: If the cron expression is invalid
        """
        return CronExpressionTrigger(cron_expression, timezone=self.timezone)

    def schedule_job(self, job: JobRecord, trigger: CronTrigger):
        """Store a job and its trigger in one step."""
        max_instances = 1 if self.exclusive_execution else self.pool_size
        scheduled = self.scheduler.add_job(
            JOB_FUNC_REF,
            trigger=trigger,
            args=[self.name, job.identity],
            kwargs={METADATA_KEY: job.metadata},
            id=job.identity,
            name=job.identity,
            max_instances=max_instances,
        )
        logger.debug(f"Stored job {job.identity}, next fire at {getattr(scheduled, 'next_run_time', None)}")
        return scheduled

    def list_job_identities(self) -> List[str]:
        return [job.id for job in self.scheduler.get_jobs()]

    def get_job_metadata(self, identity: str) -> Optional[Any]:
        job = self.scheduler.get_job(identity)
        if job is None:
            return None
        return job.kwargs.get(METADATA_KEY)

    def get_trigger(self, identity: str):
        job = self.scheduler.get_job(identity)
        if job is None:
            return None
        return job.trigger

    def is_cron_trigger(self, trigger) -> bool:
        return isinstance(trigger, CronTrigger)

    def get_cron_expression(self, trigger: CronTrigger) -> str:
        """Return the cron expression a trigger fires on."""
        expression = getattr(trigger, "expression", None)
        if expression:
            return expression

        # plain CronTrigger, rebuild from its fields
        fields = {field.name: str(field) for field in trigger.fields}
        parts = [fields[name] for name in ("second", "minute", "hour", "day", "month", "day_of_week")]
        if fields.get("year", "*") != "*":
            parts.append(fields["year"])
        return " ".join(parts)

    def _on_job_event(self, event):
        if event.code == EVENT_JOB_MAX_INSTANCES:
            logger.warning(f"Skipped fire of {event.job_id}: previous fire is still running")
        elif event.code == EVENT_JOB_MISSED:
            logger.warning(f"Missed fire of {event.job_id} scheduled for {event.scheduled_run_time}")
        elif event.code == EVENT_JOB_ERROR:
            logger.error(f"Fire of {event.job_id} failed: {event.exception}")
        else:
            logger.debug(f"Fire of {event.job_id} completed: {event.retval}")
