"""Scheduler service - periodic alert checks and retention sweeps.

The detection pass and the retention sweep are separate interval jobs,
each limited to one running instance at a time.
"""
import logging
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from ..config import settings
from .engine import AlertEngine, CheckRunResult, alert_engine
from .retention import RetentionSweeper, retention_sweeper

logger = logging.getLogger(__name__)

CHECK_JOB_ID = "run_alert_checks"
CLEANUP_JOB_ID = "cleanup_old_alerts"


class SchedulerService:
    """Owns the APScheduler instance hosting the alert jobs."""
    
    def __init__(
        self,
        engine: AlertEngine = alert_engine,
        sweeper: RetentionSweeper = retention_sweeper,
    ):
        self.engine = engine
        self.sweeper = sweeper
        self.scheduler: Optional[AsyncIOScheduler] = None
        self._running = False
    
    def start(self):
        """Start the scheduler."""
        if self._running:
            return
        
        self.scheduler = AsyncIOScheduler(timezone="UTC")
        
        self.scheduler.add_job(
            self._run_checks,
            trigger=IntervalTrigger(minutes=settings.alert_check_interval_minutes),
            id=CHECK_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        
        self.scheduler.add_job(
            self._cleanup_old_alerts,
            trigger=IntervalTrigger(hours=settings.alert_cleanup_interval_hours),
            id=CLEANUP_JOB_ID,
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )
        
        self.scheduler.start()
        self._running = True
        logger.info(
            f"Alert scheduler started (checks every {settings.alert_check_interval_minutes}m, "
            f"cleanup every {settings.alert_cleanup_interval_hours}h)"
        )
    
    def stop(self):
        """Stop the scheduler."""
        if self.scheduler and self._running:
            self.scheduler.shutdown(wait=False)
            self._running = False
            logger.info("Alert scheduler stopped")
    
    def get_status(self) -> dict:
        """Running flag, job count and next run time per job."""
        jobs = []
        if self.scheduler and self._running:
            for job in self.scheduler.get_jobs():
                jobs.append({
                    "id": job.id,
                    "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None,
                })
        return {
            "is_running": self._running,
            "task_count": len(jobs),
            "jobs": jobs,
        }
    
    async def run_manual_check(self) -> CheckRunResult:
        """Run a detection pass now, outside the schedule."""
        logger.info("Running manual alert check")
        return await self.engine.run_all_checks()
    
    async def _run_checks(self):
        try:
            await self.engine.run_all_checks()
        except Exception as e:
            logger.error(f"Error running alert checks: {e}")
    
    async def _cleanup_old_alerts(self):
        try:
            await self.sweeper.cleanup()
        except Exception as e:
            logger.error(f"Error cleaning up alerts: {e}")


# Global instance
scheduler_service = SchedulerService()
