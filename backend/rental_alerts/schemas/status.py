"""Health and scheduler status schemas."""
from typing import Dict, List, Optional
from pydantic import BaseModel


class SchedulerJob(BaseModel):
    """A scheduled alert job."""
    id: str
    next_run_time: Optional[str] = None


class SchedulerStatus(BaseModel):
    """State of the alert scheduler."""
    is_running: bool
    task_count: int
    jobs: List[SchedulerJob] = []


class HealthResponse(BaseModel):
    """Host process health, including unresolved alert counts."""
    status: str  # healthy, degraded
    scheduler: SchedulerStatus
    alerts: Optional[Dict] = None
