"""
Configuration settings for the task schedule bridge.
"""
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application settings
    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="detailed",
        description="Log format style: simple, detailed or json"
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional file receiving a copy of the log output"
    )

    # Trigger engine settings
    scheduler_name: str = Field(
        default="task-scheduler",
        description="Name under which the trigger engine registers its jobs"
    )
    jobstore_url: Optional[str] = Field(
        default=None,
        description="SQLAlchemy URL of the persistent job store (in-memory when unset)"
    )
    jobstore_tablename: str = Field(
        default="scheduled_jobs",
        description="Table holding the persisted jobs"
    )
    scheduler_pool_size: int = Field(
        default=10,
        description="Number of worker threads firing due jobs"
    )
    scheduler_timezone: str = Field(
        default="UTC",
        description="Timezone cron expressions are evaluated in"
    )
    misfire_grace_time: int = Field(
        default=60,
        description="Seconds a late fire is still allowed to run"
    )
    scheduler_auto_startup: bool = Field(
        default=True,
        description="Start the trigger engine when the service starts"
    )
    wait_for_jobs_on_shutdown: bool = Field(
        default=True,
        description="Wait for running fires to complete on shutdown"
    )

    # Schedule settings
    cron_expression_keys: List[str] = Field(
        default=[
            "scheduler.cron.expression.primary",
            "scheduler.cron.expression.short",
            "scheduler.cron.expression.legacy",
        ],
        description="Deployment property keys holding the cron expression, in priority order"
    )
    schedule_platform: str = Field(
        default="local",
        description="Platform name reported with listed schedules"
    )

    # Task launcher settings
    task_launcher_url: str = Field(
        default="http://localhost:9393",
        description="Base URL of the task launch server"
    )
    task_launcher_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for task launch requests"
    )

    # API settings
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=8003,
        description="API server port"
    )

    class Config:
        env_file = ".env"
        case_sensitive = False


# Create global settings instance
settings = Settings()
