"""Payment rule: payments left pending for three days or more."""
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from ...models import AlertType, Payment, Severity
from ...utils.timeutils import whole_days
from .base import AlertDraft, DetectionRule

PENDING_GRACE = timedelta(days=3)


class PendingPaymentsRule(DetectionRule):
    name = "payment_pending"
    alert_type = AlertType.PAYMENT_PENDING.value
    entity_type = "payment"
    
    async def find_candidates(self, session, now):
        result = await session.execute(
            select(Payment)
            .options(selectinload(Payment.customer))
            .where(
                Payment.status == "pending",
                Payment.transaction_date <= now - PENDING_GRACE,
            )
        )
        return result.scalars().all()
    
    def render(self, payment, now):
        days_pending = whole_days(now - payment.transaction_date)
        customer = payment.customer.display_name if payment.customer else "-"
        return AlertDraft(
            entity_id=str(payment.id),
            severity=Severity.WARNING.value,
            title="Payment Pending",
            message=(
                f"Payment {payment.payment_code} has been pending for {days_pending} days. "
                f"Amount: ${payment.amount}. Customer: {customer}."
            ),
            metadata={
                "paymentCode": payment.payment_code,
                "amount": payment.amount,
                "daysPending": days_pending,
                "customerId": payment.customer_id,
            },
        )
