"""Rental rules: contracts ending in a week, and contracts past their end date."""
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from ...models import AlertType, Rental, Severity
from ...models.rental import OPEN_RENTAL_STATUSES
from ...utils.timeutils import whole_days
from .base import AlertDraft, DetectionRule, fmt_date

EXPIRING_NOTICE = timedelta(days=7)


def _parties(rental: Rental) -> str:
    customer = rental.customer.display_name if rental.customer else "-"
    vehicle = rental.vehicle.description if rental.vehicle else "-"
    return f"Customer: {customer}. Vehicle: {vehicle}."


def _open_rentals():
    return (
        select(Rental)
        .options(selectinload(Rental.customer), selectinload(Rental.vehicle))
        .where(Rental.status.in_(OPEN_RENTAL_STATUSES))
    )


class ExpiringRentalsRule(DetectionRule):
    """Open rentals whose end date falls in [now + 7d, now + 8d)."""
    
    name = "rental_expiring"
    alert_type = AlertType.RENTAL_EXPIRING.value
    entity_type = "rental"
    
    async def find_candidates(self, session, now):
        window_start = now + EXPIRING_NOTICE
        window_end = window_start + timedelta(days=1)
        result = await session.execute(
            _open_rentals().where(
                Rental.end_date >= window_start,
                Rental.end_date < window_end,
            )
        )
        return result.scalars().all()
    
    def render(self, rental, now):
        return AlertDraft(
            entity_id=str(rental.id),
            severity=Severity.WARNING.value,
            title="Rental Expiring Soon",
            message=(
                f"Rental {rental.rental_code} ends in 7 days ({fmt_date(rental.end_date)}). "
                f"{_parties(rental)}"
            ),
            metadata={
                "rentalCode": rental.rental_code,
                "endDate": rental.end_date,
                "customerId": rental.customer_id,
                "vehicleId": rental.vehicle_id,
            },
        )


class OverdueRentalsRule(DetectionRule):
    """Open rentals whose end date has already passed."""
    
    name = "rental_overdue"
    alert_type = AlertType.RENTAL_OVERDUE.value
    entity_type = "rental"
    
    async def find_candidates(self, session, now):
        result = await session.execute(_open_rentals().where(Rental.end_date < now))
        return result.scalars().all()
    
    def render(self, rental, now):
        days_overdue = whole_days(now - rental.end_date)
        return AlertDraft(
            entity_id=str(rental.id),
            severity=Severity.CRITICAL.value,
            title="Rental Overdue",
            message=(
                f"Rental {rental.rental_code} is {days_overdue} day(s) overdue. "
                f"End date: {fmt_date(rental.end_date)}. {_parties(rental)}"
            ),
            metadata={
                "rentalCode": rental.rental_code,
                "endDate": rental.end_date,
                "daysOverdue": days_overdue,
                "customerId": rental.customer_id,
                "vehicleId": rental.vehicle_id,
            },
        )
