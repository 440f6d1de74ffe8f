"""Detection rules, one class per monitored condition."""
from .base import AlertDraft, DetectionRule
from .rentals import ExpiringRentalsRule, OverdueRentalsRule
from .payments import PendingPaymentsRule
from .vehicles import MaintenanceDueRule, ExpiringInsuranceRule, LowInventoryRule
from .quotes import ExpiringQuotesRule
from .leads import StaleLeadsRule

RULE_CLASSES = (
    ExpiringRentalsRule,
    OverdueRentalsRule,
    PendingPaymentsRule,
    MaintenanceDueRule,
    ExpiringInsuranceRule,
    LowInventoryRule,
    ExpiringQuotesRule,
    StaleLeadsRule,
)

__all__ = [
    "AlertDraft",
    "DetectionRule",
    "ExpiringRentalsRule",
    "OverdueRentalsRule",
    "PendingPaymentsRule",
    "MaintenanceDueRule",
    "ExpiringInsuranceRule",
    "LowInventoryRule",
    "ExpiringQuotesRule",
    "StaleLeadsRule",
    "RULE_CLASSES",
]
