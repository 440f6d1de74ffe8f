"""Lead model - read-only for the alert engine."""
from sqlalchemy import Column, Integer, String, DateTime, Numeric

from ..database import Base
from ..utils.timeutils import utcnow

TERMINAL_LEAD_STATUSES = ("won", "lost")


class Lead(Base):
    """A sales pipeline lead with a scheduled follow-up."""
    
    __tablename__ = "leads"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    lead_code = Column(String(20), nullable=False, unique=True)
    name = Column(String(255), nullable=False)
    company = Column(String(255), nullable=True)
    status = Column(String(20), nullable=False, default="new")  # new, contacted, qualified, proposal, negotiation, won, lost
    priority = Column(String(10), nullable=False, default="medium")  # low, medium, high
    estimated_value = Column(Numeric(12, 2), nullable=False, default=0)
    assigned_to = Column(Integer, nullable=True)  # User ID
    next_follow_up = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utcnow)
