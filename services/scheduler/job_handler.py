"""
Job executed by the trigger engine every time a schedule fires.
"""

import logging
from typing import Any

from . import codec
from .exceptions import DecodeError, JobExecutionError
from .models import LaunchResponse

logger = logging.getLogger(__name__)


class ScheduledTaskJob:
    """
    Launches the scheduled task through the task launcher.

    The engine registers jobs handled here with a single allowed instance, so a
    fire that is still running causes the next fire of the same schedule to be
    skipped instead of launching the task twice.
    """

    disallow_concurrent_execution = True

    def __init__(self, launcher):
        """
        Initialize the job.

        Args:
            launcher: TaskLauncher used to start task executions
        """
        self.launcher = launcher

    def execute(self, schedule_name: str, properties: Any) -> LaunchResponse:
        """
        Decode the job metadata and launch the task once.

        Args:
            schedule_name: Identity of the fired job
            properties: JSON metadata payload stored with the job

        Returns:
            The launcher's response for the started execution

        Raises:
            JobExecutionError: If the metadata cannot be decoded or the launch fails
        """
        try:
            metadata = codec.decode(properties)
        except DecodeError as e:
            logger.error(f"Failed to read metadata of scheduled task {schedule_name}: {e}")
            raise JobExecutionError(schedule_name, e) from e

        try:
            response = self.launcher.launch(
                metadata.task_definition_name,
                metadata.deployment_properties,
                metadata.commandline_arguments,
            )
        except Exception as e:
            logger.error(f"Failed to launch scheduled task: {schedule_name} - {e}")
            raise JobExecutionError(schedule_name, e) from e

        logger.info(
            f"Scheduled task launched - name: {metadata.task_definition_name}, "
            f"schedule: {schedule_name}, executionId: {getattr(response, 'execution_id', response)}"
        )
        return response
