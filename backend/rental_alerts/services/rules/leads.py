"""Lead rule: open leads whose scheduled follow-up has passed."""
from datetime import timedelta

from sqlalchemy import select

from ...models import AlertType, Lead, Severity
from ...models.lead import TERMINAL_LEAD_STATUSES
from ...utils.timeutils import whole_days
from .base import AlertDraft, DetectionRule, fmt_date

STALE_CRITICAL_AFTER = timedelta(days=3)


class StaleLeadsRule(DetectionRule):
    name = "stale_lead"
    alert_type = AlertType.CUSTOM.value
    entity_type = "lead"
    
    async def find_candidates(self, session, now):
        result = await session.execute(
            select(Lead).where(
                Lead.status.not_in(TERMINAL_LEAD_STATUSES),
                Lead.next_follow_up.is_not(None),
                Lead.next_follow_up < now,
            )
        )
        return result.scalars().all()
    
    def render(self, lead, now):
        overdue = now - lead.next_follow_up
        days_overdue = whole_days(overdue)
        who = f"{lead.name} ({lead.company})" if lead.company else lead.name
        return AlertDraft(
            entity_id=str(lead.id),
            severity=(
                Severity.CRITICAL.value if overdue > STALE_CRITICAL_AFTER
                else Severity.WARNING.value
            ),
            title="Lead Follow-up Overdue",
            message=(
                f"Lead {lead.lead_code} - {who} was due for follow-up on "
                f"{fmt_date(lead.next_follow_up)} ({days_overdue} day(s) ago). Status: {lead.status}."
            ),
            metadata={
                "kind": "stale_lead",
                "leadCode": lead.lead_code,
                "status": lead.status,
                "priority": lead.priority,
                "nextFollowUp": lead.next_follow_up,
                "daysOverdue": days_overdue,
                "assignedTo": lead.assigned_to,
            },
        )
