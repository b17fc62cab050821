"""
Task launchers used to start task executions from scheduled fires.
"""

import logging
import shlex
from typing import Dict, List

import httpx

from .models import LaunchResponse

logger = logging.getLogger(__name__)


class TaskLauncher:
    """Interface for starting task executions."""

    def launch(self, task_name: str, properties: Dict[str, str], arguments: List[str]) -> LaunchResponse:
        """
        Start a task execution.

        Args:
            task_name: Name of the task definition
            properties: Deployment properties for this execution
            arguments: Command-line arguments for the task

        Returns:
            LaunchResponse carrying the execution ID
        """
        raise NotImplementedError


class DataflowTaskLauncher(TaskLauncher):
    """Launches tasks through the REST API of a data flow server.

    Properties are sent comma separated as ``key=value`` pairs and arguments as a
    single shell-quoted string, so arguments containing spaces stay intact.
    """

    def __init__(self, server_url: str = "http://localhost:9393", timeout: float = 30.0):
        """
        Initialize the launcher.

        Args:
            server_url: Base URL of the data flow server
            timeout: Request timeout in seconds
        """
        self.server_url = server_url.rstrip("/")
        self.timeout = timeout

    def launch(self, task_name: str, properties: Dict[str, str], arguments: List[str]) -> LaunchResponse:
        params = {"name": task_name}
        if properties:
            params["properties"] = ",".join(f"{key}={value}" for key, value in properties.items())
        if arguments:
            params["arguments"] = shlex.join(arguments)

        logger.debug(f"Launching task {task_name} via {self.server_url}")
        response = httpx.post(
            f"{self.server_url}/tasks/executions",
            params=params,
            timeout=self.timeout
        )
        response.raise_for_status()

        return self._parse_response(response.json())

    @staticmethod
    def _parse_response(body) -> LaunchResponse:
        if isinstance(body, dict):
            return LaunchResponse(
                execution_id=body["executionId"],
                schema_target=body.get("schemaTarget"),
            )
        return LaunchResponse(execution_id=body)
