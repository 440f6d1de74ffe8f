"""Quote rule: open quotes about to lapse or already past their validity."""
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from ...models import AlertType, Quote, Severity
from ...models.quote import OPEN_QUOTE_STATUSES
from ...utils.timeutils import whole_days
from ..quote_actions import expire_quotes, expire_statement
from .base import AlertDraft, DetectionRule, fmt_date

EXPIRY_NOTICE = timedelta(days=2)


class ExpiringQuotesRule(DetectionRule):
    """Draft/sent quotes valid for at most two more days, or already lapsed.
    
    A lapsed quote moves to ``expired`` in the same transaction as its alert,
    so a failed insert leaves it open for the next pass. Lapsed quotes that
    already have a recent alert are expired on their own.
    """
    
    name = "quote_expiring"
    alert_type = AlertType.CUSTOM.value
    entity_type = "quote"
    
    async def find_candidates(self, session, now):
        result = await session.execute(
            select(Quote)
            .options(selectinload(Quote.customer))
            .where(
                Quote.status.in_(OPEN_QUOTE_STATUSES),
                Quote.valid_until <= now + EXPIRY_NOTICE,
            )
        )
        return result.scalars().all()
    
    async def handle_suppressed(self, session, candidates, now):
        lapsed = [quote for quote in candidates if quote.valid_until < now]
        if lapsed:
            await expire_quotes(session, lapsed)
    
    def render(self, quote, now):
        is_expired = quote.valid_until < now
        customer = quote.customer.display_name if quote.customer else "-"
        valid_until = fmt_date(quote.valid_until)
        if is_expired:
            title = "Quote Expired"
            message = (
                f"Quote {quote.quote_code} expired on {valid_until} and was marked as expired. "
                f"Customer: {customer}. Total: ${quote.total_amount}."
            )
        else:
            days_left = whole_days(quote.valid_until - now)
            title = "Quote Expiring Soon"
            message = (
                f"Quote {quote.quote_code} expires in {days_left} day(s) ({valid_until}). "
                f"Customer: {customer}. Total: ${quote.total_amount}."
            )
        
        return AlertDraft(
            entity_id=str(quote.id),
            severity=Severity.CRITICAL.value if is_expired else Severity.WARNING.value,
            title=title,
            message=message,
            metadata={
                "kind": "quote_expiring",
                "quoteCode": quote.quote_code,
                "validUntil": quote.valid_until,
                "totalAmount": quote.total_amount,
                "customerId": quote.customer_id,
                "isExpired": is_expired,
            },
            statements=[expire_statement([quote.id])] if is_expired else [],
        )
