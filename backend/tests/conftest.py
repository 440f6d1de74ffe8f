"""
Pytest configuration and fixtures for the alert engine tests.
Provides a throwaway SQLite database per test and small data factories.
"""
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

import pytest
import pytest_asyncio
from sqlalchemy import event

from rental_alerts.database import build_engine, build_sessionmaker, init_db
from rental_alerts.models import (
    Alert, Customer, Lead, Payment, Quote, Rental, Vehicle, VehicleType,
)
from rental_alerts.utils.timeutils import utcnow


@pytest_asyncio.fixture
async def engine(tmp_path):
    """File-backed SQLite engine so concurrent rule sessions share one database"""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'alerts.db'}")
    await init_db(bind=engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_sessionmaker(engine)


@pytest.fixture
def now() -> datetime:
    return utcnow()


@pytest.fixture
def statements(engine):
    """Records every SQL statement sent through the engine"""
    captured = []

    def _capture(conn, cursor, statement, parameters, context, executemany):
        captured.append(" ".join(statement.split()))

    event.listen(engine.sync_engine, "before_cursor_execute", _capture)
    yield captured
    event.remove(engine.sync_engine, "before_cursor_execute", _capture)


def alert_selects(statements):
    """SELECT statements that read the alerts table"""
    return [s for s in statements if s.upper().startswith("SELECT") and " FROM alerts" in s]


class Factory:
    """Inserts business rows and alerts, one commit per row"""

    def __init__(self, session_factory):
        self.session_factory = session_factory
        self._seq = 0

    def _next(self) -> int:
        self._seq += 1
        return self._seq

    async def _add(self, obj):
        async with self.session_factory() as session:
            session.add(obj)
            await session.commit()
        return obj

    async def customer(self, name: str = "Acme Logistics", **kw) -> Customer:
        return await self._add(Customer(name=name, **kw))

    async def vehicle_type(self, name: Optional[str] = None) -> VehicleType:
        return await self._add(VehicleType(name=name or f"Type {self._next()}", daily_rate=Decimal("50.00")))

    async def vehicle(self, vehicle_type: Optional[VehicleType] = None, **kw) -> Vehicle:
        if vehicle_type is None:
            vehicle_type = await self.vehicle_type()
        n = self._next()
        kw.setdefault("make", "Nissan")
        kw.setdefault("model", "Versa")
        kw.setdefault("license_plate", f"ABC-{n:03d}")
        kw.setdefault("status", "available")
        kw.setdefault("is_active", True)
        kw.setdefault("mileage", 12000)
        return await self._add(Vehicle(vehicle_type_id=vehicle_type.id, **kw))

    async def rental(self, end_date: datetime, status: str = "active", **kw) -> Rental:
        if "customer_id" not in kw:
            kw["customer_id"] = (await self.customer()).id
        if "vehicle_id" not in kw:
            kw["vehicle_id"] = (await self.vehicle(status="rented")).id
        kw.setdefault("rental_code", f"RNT-{self._next():04d}")
        kw.setdefault("start_date", end_date - timedelta(days=10))
        return await self._add(Rental(end_date=end_date, status=status, total_amount=Decimal("1500.00"), **kw))

    async def payment(self, transaction_date: datetime, status: str = "pending", **kw) -> Payment:
        if "customer_id" not in kw:
            kw["customer_id"] = (await self.customer()).id
        kw.setdefault("payment_code", f"PAY-{self._next():04d}")
        kw.setdefault("amount", Decimal("250.00"))
        return await self._add(Payment(transaction_date=transaction_date, status=status, **kw))

    async def quote(self, valid_until: datetime, status: str = "sent", **kw) -> Quote:
        if "customer_id" not in kw:
            kw["customer_id"] = (await self.customer()).id
        kw.setdefault("quote_code", f"QUO-{self._next():04d}")
        kw.setdefault("total_amount", Decimal("980.00"))
        return await self._add(Quote(valid_until=valid_until, status=status, **kw))

    async def lead(self, next_follow_up: Optional[datetime], status: str = "contacted", **kw) -> Lead:
        kw.setdefault("lead_code", f"LID-{self._next():04d}")
        kw.setdefault("name", "Maria Lopez")
        return await self._add(Lead(next_follow_up=next_follow_up, status=status, **kw))

    async def alert(self, alert_type: str, entity_type: str, entity_id: str, **kw) -> Alert:
        kw.setdefault("severity", "warning")
        kw.setdefault("title", "Existing alert")
        kw.setdefault("message", "Existing alert")
        return await self._add(Alert(
            alert_type=alert_type,
            entity_type=entity_type,
            entity_id=entity_id,
            **kw,
        ))


@pytest.fixture
def factory(session_factory):
    return Factory(session_factory)


async def fetch_alerts(session_factory, *criteria):
    from sqlalchemy import select

    async with session_factory() as session:
        result = await session.execute(select(Alert).where(*criteria).order_by(Alert.id))
        return result.scalars().all()
