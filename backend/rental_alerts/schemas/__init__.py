"""Pydantic schemas for the host app responses."""
from .status import HealthResponse, SchedulerJob, SchedulerStatus

__all__ = ["HealthResponse", "SchedulerJob", "SchedulerStatus"]
