"""
Pytest configuration and fixtures for the task scheduler tests.
"""
import sys
import threading
import uuid
from pathlib import Path

import pytest

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from services.scheduler.engine import TriggerEngine
from services.scheduler.job_handler import ScheduledTaskJob
from services.scheduler.models import LaunchResponse, ScheduleRequest
from services.scheduler.registrar import SchedulerRegistrar
from services.scheduler.run_launcher import TaskLauncher


class RecordingLauncher(TaskLauncher):
    """Task launcher that records every launch instead of starting a task."""

    def __init__(self, delay: float = 0.0):
        self.delay = delay
        self.calls = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def launch(self, task_name, properties, arguments):
        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
            self.calls.append((task_name, dict(properties), list(arguments)))
            execution_id = len(self.calls)
        try:
            if self.delay:
                threading.Event().wait(self.delay)
            return LaunchResponse(execution_id=execution_id)
        finally:
            with self._lock:
                self.active -= 1


@pytest.fixture
def launcher():
    """Recording task launcher."""
    return RecordingLauncher()


@pytest.fixture
def slow_launcher():
    """Recording task launcher whose launches take 1.5 seconds."""
    return RecordingLauncher(delay=1.5)


@pytest.fixture
def engine(launcher):
    """In-memory trigger engine that stores jobs but never fires them."""
    engine = TriggerEngine(
        name=f"test-engine-{uuid.uuid4().hex[:8]}",
        job_handler=ScheduledTaskJob(launcher),
    )
    engine.start(paused=True)
    yield engine
    engine.shutdown(wait=False)


@pytest.fixture
def registrar(engine):
    """Registrar on top of the paused in-memory engine."""
    return SchedulerRegistrar(engine)


@pytest.fixture
def daily_report_request():
    """Schedule request of the daily report task."""
    return ScheduleRequest(
        schedule_name="daily-report",
        task_definition_name="report",
        deployment_properties={"scheduler.cron.expression.primary": "0 0 * * * ?"},
        commandline_arguments=["--verbose"],
    )
