"""
Scheduler Registrar for registering, replacing, removing and listing schedules.
"""

import logging
from typing import List, Optional, Sequence

from . import codec
from .cron_utils import CRON_EXPRESSION_KEYS, resolve_cron_expression
from .exceptions import MissingCronError, SchedulingFailure
from .models import ScheduleInfo, ScheduleMetadata, ScheduleRequest

logger = logging.getLogger(__name__)


class SchedulerRegistrar:
    """Maps schedule requests onto jobs and cron triggers of the trigger engine."""

    def __init__(
        self,
        engine,
        cron_expression_keys: Sequence[str] = CRON_EXPRESSION_KEYS,
        platform: str = "local"
    ):
        """
        Initialize the registrar.

        Args:
            engine: TriggerEngine holding the jobs
            cron_expression_keys: Property keys holding the cron expression, in priority order
            platform: Platform name reported with listed schedules
        """
        self.engine = engine
        self.cron_expression_keys = tuple(cron_expression_keys)
        self.platform = platform

    def schedule(self, request: ScheduleRequest) -> None:
        """
        Schedule a task, replacing any schedule with the same name.

        Args:
            request: Schedule request

        Raises:
            MissingCronError: If no cron expression is present in the properties.
                An existing schedule with the same name has already been deleted
                when this is raised.
            SchedulingFailure: If the job could not be stored
        """
        schedule_name = request.schedule_name
        logger.info(
            f"Scheduling task - name: {schedule_name}, definition: {request.task_definition_name}, "
            f"properties: {request.deployment_properties}"
        )

        try:
            if self.engine.job_exists(schedule_name):
                logger.info(f"Deleting existing job: {schedule_name}")
                self.engine.delete_job(schedule_name)

            cron_expression, properties = resolve_cron_expression(
                request.deployment_properties, self.cron_expression_keys
            )
            logger.info(f"Using cron expression: {cron_expression}")

            metadata = ScheduleMetadata(
                task_definition_name=request.task_definition_name,
                deployment_properties=properties,
                commandline_arguments=list(request.commandline_arguments),
                cron_expression=cron_expression,
            )

            job = self.engine.create_job(schedule_name, codec.encode(metadata))
            trigger = self.engine.create_cron_trigger(cron_expression)
            self.engine.schedule_job(job, trigger)

        except MissingCronError:
            raise
        except Exception as e:
            logger.error(f"Failed to schedule task {schedule_name}: {e}")
            raise SchedulingFailure(schedule_name, e) from e

        logger.info(f"Successfully scheduled task - name: {schedule_name}, cron: {cron_expression}")

    def unschedule(self, schedule_name: str) -> None:
        """
        Delete a schedule. Deleting an unknown schedule is a no-op.

        Raises:
            SchedulingFailure: If the trigger engine fails to delete the job
        """
        try:
            if self.engine.job_exists(schedule_name):
                self.engine.delete_job(schedule_name)
                logger.info(f"Unscheduled task: {schedule_name}")
            else:
                logger.warning(f"No job found to unschedule: {schedule_name}")
        except Exception as e:
            logger.error(f"Failed to unschedule task {schedule_name}: {e}")
            raise SchedulingFailure(schedule_name, e, action="unschedule") from e

    def list_schedules(self, task_definition_name: Optional[str] = None) -> List[ScheduleInfo]:
        """
        List schedules, optionally only those of one task definition.

        Jobs whose metadata cannot be read are left out of the result.

        Args:
            task_definition_name: Exact task definition name to filter by

        Returns:
            Schedules in no particular order
        """
        try:
            identities = self.engine.list_job_identities()
        except Exception as e:
            logger.error(f"Failed to list schedules: {e}")
            return []

        schedules = []
        for identity in identities:
            try:
                info = self._create_schedule_info(identity, task_definition_name)
            except Exception as e:
                logger.warning(f"Failed to get schedule info for job: {identity} - {e}")
                continue

            if info is not None:
                schedules.append(info)

        return schedules

    def _create_schedule_info(self, identity: str, task_definition_name: Optional[str]) -> Optional[ScheduleInfo]:
        payload = self.engine.get_job_metadata(identity)
        if payload is None:
            return None

        trigger = self.engine.get_trigger(identity)
        if trigger is None or not self.engine.is_cron_trigger(trigger):
            return None

        metadata = codec.decode(payload)
        if not metadata.task_definition_name:
            return None
        if task_definition_name is not None and metadata.task_definition_name != task_definition_name:
            return None

        properties = {
            self.cron_expression_keys[0]: self.engine.get_cron_expression(trigger),
            "platform": self.platform,
        }
        properties.update(metadata.deployment_properties)

        return ScheduleInfo(
            schedule_name=identity,
            task_definition_name=metadata.task_definition_name,
            schedule_properties=properties,
        )
