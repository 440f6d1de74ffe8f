"""Alert model - durable record produced by the detection rules."""
import enum
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, Index

from ..database import Base
from ..utils.timeutils import utcnow


class AlertType(str, enum.Enum):
    """Which rule (or actor) produced an alert."""
    RENTAL_EXPIRING = "rental_expiring"
    RENTAL_OVERDUE = "rental_overdue"
    PAYMENT_PENDING = "payment_pending"
    MAINTENANCE_DUE = "maintenance_due"
    INSURANCE_EXPIRING = "insurance_expiring"
    LOW_INVENTORY = "low_inventory"
    SYSTEM = "system"
    CUSTOM = "custom"


class Severity(str, enum.Enum):
    """Urgency classification: info < warning < critical."""
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class Alert(Base):
    """An operational alert about a rental, payment, vehicle, quote or lead.
    
    (alert_type, entity_type, entity_id) is the dedup key. Uniqueness is not
    enforced by the database; see services.deduplicator.
    """
    
    __tablename__ = "alerts"
    __table_args__ = (
        Index("ix_alerts_dedup_key", "alert_type", "entity_type", "entity_id"),
    )
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    alert_type = Column(String(50), nullable=False)
    severity = Column(String(20), nullable=False, default=Severity.INFO.value, index=True)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    entity_type = Column(String(50), nullable=True)  # rental, payment, vehicle, vehicle_type, quote, lead
    entity_id = Column(String(50), nullable=True)
    is_read = Column(Boolean, nullable=False, default=False, index=True)
    is_resolved = Column(Boolean, nullable=False, default=False, index=True)
    assigned_to = Column(Integer, nullable=True)  # User ID
    resolved_by = Column(Integer, nullable=True)  # User ID
    resolved_at = Column(DateTime, nullable=True)
    expires_at = Column(DateTime, nullable=True)
    # "metadata" is reserved on declarative classes
    meta = Column("metadata", Text, nullable=True)  # JSON written once by the engine
    created_at = Column(DateTime, default=utcnow, index=True)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
    
    def __repr__(self) -> str:
        return (
            f"<Alert {self.id} {self.alert_type} {self.severity} "
            f"{self.entity_type}:{self.entity_id}>"
        )
