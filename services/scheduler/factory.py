"""
Builds the scheduler components from application settings.
"""

import logging
from typing import Optional

from core.config import Settings, settings as default_settings

from .engine import TriggerEngine
from .job_handler import ScheduledTaskJob
from .registrar import SchedulerRegistrar
from .run_launcher import DataflowTaskLauncher, TaskLauncher

logger = logging.getLogger(__name__)


def create_task_launcher(config: Settings) -> TaskLauncher:
    return DataflowTaskLauncher(
        server_url=config.task_launcher_url,
        timeout=config.task_launcher_timeout
    )


def create_trigger_engine(config: Settings, launcher: TaskLauncher) -> TriggerEngine:
    """Create a trigger engine whose jobs launch tasks through the given launcher."""
    return TriggerEngine(
        name=config.scheduler_name,
        job_handler=ScheduledTaskJob(launcher),
        jobstore_url=config.jobstore_url,
        jobstore_tablename=config.jobstore_tablename,
        pool_size=config.scheduler_pool_size,
        timezone=config.scheduler_timezone,
        misfire_grace_time=config.misfire_grace_time,
        wait_for_jobs_on_shutdown=config.wait_for_jobs_on_shutdown,
    )


def create_registrar(
    config: Optional[Settings] = None,
    launcher: Optional[TaskLauncher] = None
) -> SchedulerRegistrar:
    """
    Wire launcher, job handler, trigger engine and registrar together.

    The engine is not started; use ``registrar.engine.start()``.
    """
    config = config or default_settings
    launcher = launcher or create_task_launcher(config)
    engine = create_trigger_engine(config, launcher)

    logger.info(
        f"Created scheduler {config.scheduler_name} "
        f"({'in-memory' if not config.jobstore_url else 'persistent'} job store, "
        f"{config.scheduler_pool_size} workers)"
    )

    return SchedulerRegistrar(
        engine,
        cron_expression_keys=config.cron_expression_keys,
        platform=config.schedule_platform
    )
