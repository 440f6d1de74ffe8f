"""
Tests for the batched dedup check
Run with: pytest backend/tests/test_deduplicator.py -v
"""
from datetime import timedelta

import pytest

from rental_alerts.services.deduplicator import Deduplicator, DEDUP_WINDOW

from .conftest import alert_selects


class TestSuppression:
    """Which candidates an existing alert suppresses"""

    @pytest.mark.asyncio
    async def test_empty_candidates_issue_no_query(self, session_factory, statements, now):
        async with session_factory() as session:
            suppressed = await Deduplicator().suppressed_ids(session, "rental_overdue", "rental", [], now)

        assert suppressed == set()
        assert alert_selects(statements) == []

    @pytest.mark.asyncio
    async def test_unresolved_alert_suppresses_regardless_of_age(self, factory, session_factory, now):
        await factory.alert("rental_overdue", "rental", "7", created_at=now - timedelta(days=90))

        async with session_factory() as session:
            suppressed = await Deduplicator().suppressed_ids(
                session, "rental_overdue", "rental", ["7", "8"], now
            )

        assert suppressed == {"7"}

    @pytest.mark.asyncio
    async def test_recent_resolved_alert_suppresses(self, factory, session_factory, now):
        await factory.alert(
            "payment_pending", "payment", "3",
            created_at=now - timedelta(hours=2),
            is_resolved=True, resolved_at=now - timedelta(hours=1),
        )

        async with session_factory() as session:
            suppressed = await Deduplicator().suppressed_ids(session, "payment_pending", "payment", ["3"], now)

        assert suppressed == {"3"}

    @pytest.mark.asyncio
    async def test_old_resolved_alert_does_not_suppress(self, factory, session_factory, now):
        await factory.alert(
            "payment_pending", "payment", "3",
            created_at=now - DEDUP_WINDOW - timedelta(minutes=1),
            is_resolved=True, resolved_at=now - timedelta(hours=1),
        )

        async with session_factory() as session:
            suppressed = await Deduplicator().suppressed_ids(session, "payment_pending", "payment", ["3"], now)

        assert suppressed == set()

    @pytest.mark.asyncio
    async def test_key_includes_type_and_entity_type(self, factory, session_factory, now):
        await factory.alert("custom", "quote", "5")
        await factory.alert("maintenance_due", "vehicle", "5")

        async with session_factory() as session:
            dedup = Deduplicator()
            leads = await dedup.suppressed_ids(session, "custom", "lead", ["5"], now)
            insurance = await dedup.suppressed_ids(session, "insurance_expiring", "vehicle", ["5"], now)
            quotes = await dedup.suppressed_ids(session, "custom", "quote", [5], now)

        assert leads == set()
        assert insurance == set()
        assert quotes == {"5"}

    @pytest.mark.asyncio
    async def test_many_candidates_one_query(self, factory, session_factory, statements, now):
        for entity_id in ("2", "4", "6"):
            await factory.alert("rental_expiring", "rental", entity_id)
        statements.clear()

        async with session_factory() as session:
            suppressed = await Deduplicator().suppressed_ids(
                session, "rental_expiring", "rental", [str(i) for i in range(1, 51)], now
            )

        assert suppressed == {"2", "4", "6"}
        assert len(alert_selects(statements)) == 1

    @pytest.mark.asyncio
    async def test_candidates_beyond_sqlite_parameter_limit(self, factory, session_factory, statements, now):
        await factory.alert("payment_pending", "payment", "39999")
        statements.clear()

        async with session_factory() as session:
            suppressed = await Deduplicator().suppressed_ids(
                session, "payment_pending", "payment", [str(i) for i in range(40000)], now
            )

        assert suppressed == {"39999"}
        assert len(alert_selects(statements)) == 1
