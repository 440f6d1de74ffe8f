"""
Tests for the alert scheduler service
Run with: pytest backend/tests/test_scheduler.py -v
"""
from unittest.mock import AsyncMock

import pytest

from rental_alerts.services.engine import CheckRunResult
from rental_alerts.services.retention import CleanupResult
from rental_alerts.services.scheduler import CHECK_JOB_ID, CLEANUP_JOB_ID, SchedulerService


@pytest.fixture
def stub_engine():
    engine = AsyncMock()
    engine.run_all_checks.return_value = CheckRunResult(counts_by_rule={"rental_overdue": 2}, total=2)
    return engine


@pytest.fixture
def stub_sweeper():
    sweeper = AsyncMock()
    sweeper.cleanup.return_value = CleanupResult(expired_deleted=1)
    return sweeper


class TestSchedulerService:

    @pytest.mark.asyncio
    async def test_start_registers_both_jobs(self, stub_engine, stub_sweeper):
        service = SchedulerService(engine=stub_engine, sweeper=stub_sweeper)

        service.start()
        try:
            status = service.get_status()
        finally:
            service.stop()

        assert status["is_running"] is True
        assert status["task_count"] == 2
        assert {job["id"] for job in status["jobs"]} == {CHECK_JOB_ID, CLEANUP_JOB_ID}
        assert all(job["next_run_time"] for job in status["jobs"])
        assert service.get_status() == {"is_running": False, "task_count": 0, "jobs": []}

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, stub_engine, stub_sweeper):
        service = SchedulerService(engine=stub_engine, sweeper=stub_sweeper)

        service.start()
        scheduler = service.scheduler
        service.start()
        try:
            assert service.scheduler is scheduler
        finally:
            service.stop()

    @pytest.mark.asyncio
    async def test_manual_check_delegates_to_engine(self, stub_engine, stub_sweeper):
        service = SchedulerService(engine=stub_engine, sweeper=stub_sweeper)

        result = await service.run_manual_check()

        assert result.total == 2
        stub_engine.run_all_checks.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_job_wrappers_contain_errors(self, stub_engine, stub_sweeper):
        stub_engine.run_all_checks.side_effect = RuntimeError("boom")
        stub_sweeper.cleanup.side_effect = RuntimeError("boom")
        service = SchedulerService(engine=stub_engine, sweeper=stub_sweeper)

        await service._run_checks()
        await service._cleanup_old_alerts()

        stub_engine.run_all_checks.assert_awaited_once()
        stub_sweeper.cleanup.assert_awaited_once()
