"""Services for alert detection, storage, retention and scheduling."""
from .alert_store import AlertStore, alert_store
from .deduplicator import Deduplicator, deduplicator, DEDUP_WINDOW
from .alert_writer import AlertWriter, alert_writer
from .engine import AlertEngine, CheckRunResult, RuleOutcome, alert_engine
from .retention import RetentionSweeper, CleanupResult, retention_sweeper, RETENTION_WINDOW
from .scheduler import SchedulerService, scheduler_service

__all__ = [
    "AlertStore", "alert_store",
    "Deduplicator", "deduplicator", "DEDUP_WINDOW",
    "AlertWriter", "alert_writer",
    "AlertEngine", "CheckRunResult", "RuleOutcome", "alert_engine",
    "RetentionSweeper", "CleanupResult", "retention_sweeper", "RETENTION_WINDOW",
    "SchedulerService", "scheduler_service",
]
