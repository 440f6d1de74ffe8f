"""Payment model - read-only for the alert engine."""
from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship

from ..database import Base
from ..utils.timeutils import utcnow


class Payment(Base):
    """A payment against a rental or invoice."""
    
    __tablename__ = "payments"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    payment_code = Column(String(50), nullable=False, unique=True)
    rental_id = Column(Integer, ForeignKey("rentals.id"), nullable=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, default="pending")  # pending, completed, failed, refunded
    transaction_date = Column(DateTime, nullable=False, default=utcnow)
    created_at = Column(DateTime, default=utcnow)
    
    customer = relationship("Customer")
