"""
Data models for the scheduler service.
"""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class ScheduleRequest(BaseModel):
    """Request to schedule a task definition on a cron expression."""

    schedule_name: str = Field(..., min_length=1, description="Unique name of the schedule")
    task_definition_name: str = Field(..., min_length=1, description="Name of the task definition to launch")
    deployment_properties: Dict[str, str] = Field(
        default_factory=dict,
        description="Deployment properties, including the cron expression"
    )
    commandline_arguments: List[str] = Field(
        default_factory=list,
        description="Command-line arguments passed to the task"
    )


class ScheduleMetadata(BaseModel):
    """Execution metadata persisted with every scheduled job."""

    task_definition_name: str
    deployment_properties: Dict[str, str] = Field(default_factory=dict)
    commandline_arguments: List[str] = Field(default_factory=list)
    cron_expression: Optional[str] = None


class ScheduleInfo(BaseModel):
    """A schedule as reported back to callers."""

    schedule_name: str = Field(..., description="Unique name of the schedule")
    task_definition_name: str = Field(..., description="Name of the scheduled task definition")
    schedule_properties: Dict[str, str] = Field(
        default_factory=dict,
        description="Cron expression, platform and deployment properties"
    )


class LaunchResponse(BaseModel):
    """Result of launching a task."""

    execution_id: int = Field(..., description="ID of the task execution")
    schema_target: Optional[str] = Field(None, description="Schema target reported by the launch server")
