"""Quote model - read by the alert engine; status is moved to expired."""
from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship

from ..database import Base
from ..utils.timeutils import utcnow

OPEN_QUOTE_STATUSES = ("draft", "sent")


class Quote(Base):
    """A price quote sent to a customer, valid until a given date."""
    
    __tablename__ = "quotes"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    quote_code = Column(String(50), nullable=False, unique=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(String(20), nullable=False, default="draft")  # draft, sent, accepted, rejected, expired, converted
    valid_until = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
    
    customer = relationship("Customer")
