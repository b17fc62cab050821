"""
FastAPI endpoints for the scheduler service.
"""

from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from core.config import settings
from core.logging_config import configure_logging_from_settings, get_logger

from .exceptions import MissingCronError, SchedulingFailure
from .factory import create_registrar
from .models import ScheduleInfo, ScheduleRequest
from .registrar import SchedulerRegistrar

logger = get_logger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Task Scheduler Service",
    description="Service for managing cron-based task schedules",
    version="1.0.0"
)

# Global instances
registrar: Optional[SchedulerRegistrar] = None


def get_registrar() -> SchedulerRegistrar:
    """Dependency to get registrar instance."""
    if registrar is None:
        raise HTTPException(status_code=500, detail="Registrar not initialized")
    return registrar


@app.on_event("startup")
async def startup_event():
    """Initialize service components on startup."""
    global registrar

    configure_logging_from_settings(settings)

    try:
        registrar = create_registrar(settings)
        # paused engines attach their job store but fire nothing
        registrar.engine.start(paused=not settings.scheduler_auto_startup)

        logger.info("Scheduler service initialized successfully")

    except Exception as e:
        logger.error(f"Failed to initialize scheduler service: {e}")
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    global registrar

    if registrar is not None:
        registrar.engine.shutdown()
        logger.info("Trigger engine stopped")
        registrar = None


# API Models
class ScheduleResponse(BaseModel):
    schedule_name: str
    status: str


class ScheduleListResponse(BaseModel):
    schedules: List[ScheduleInfo]


class StatusResponse(BaseModel):
    status: str
    engine_status: Dict[str, Any]


# Health check
@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "task-scheduler"}


# Schedule management endpoints
@app.post("/schedules", response_model=ScheduleResponse, status_code=201)
def create_schedule(
    request: ScheduleRequest,
    registrar: SchedulerRegistrar = Depends(get_registrar)
):
    """Create or replace a schedule."""
    try:
        registrar.schedule(request)
        return ScheduleResponse(schedule_name=request.schedule_name, status="scheduled")
    except MissingCronError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SchedulingFailure as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.delete("/schedules/{schedule_name}", response_model=ScheduleResponse)
def delete_schedule(
    schedule_name: str,
    registrar: SchedulerRegistrar = Depends(get_registrar)
):
    """Delete a schedule. Unknown schedules are ignored."""
    try:
        registrar.unschedule(schedule_name)
        return ScheduleResponse(schedule_name=schedule_name, status="unscheduled")
    except SchedulingFailure as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/schedules", response_model=ScheduleListResponse)
def list_schedules(
    task_definition_name: Optional[str] = None,
    registrar: SchedulerRegistrar = Depends(get_registrar)
):
    """List schedules, optionally only those of one task definition."""
    return ScheduleListResponse(schedules=registrar.list_schedules(task_definition_name))


@app.get("/scheduler/status", response_model=StatusResponse)
def get_scheduler_status(registrar: SchedulerRegistrar = Depends(get_registrar)):
    """Get the current status of the trigger engine."""
    engine = registrar.engine
    engine_status = {
        "name": engine.name,
        "running": engine.running,
        "paused": engine.paused,
        "jobs": len(engine.list_job_identities()),
        "pool_size": engine.pool_size,
    }
    return StatusResponse(
        status=_engine_state(engine),
        engine_status=engine_status
    )


@app.post("/scheduler/resume", response_model=StatusResponse)
def resume_scheduler(registrar: SchedulerRegistrar = Depends(get_registrar)):
    """Let a paused trigger engine start firing schedules."""
    if not registrar.engine.running:
        raise HTTPException(status_code=409, detail="Trigger engine is not running")

    registrar.engine.resume()
    return get_scheduler_status(registrar)


def _engine_state(engine) -> str:
    if engine.paused:
        return "paused"
    return "running" if engine.running else "stopped"


# Error handlers
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )
