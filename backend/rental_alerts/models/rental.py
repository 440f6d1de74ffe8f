"""Rental model - read-only for the alert engine."""
from sqlalchemy import Column, Integer, String, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship

from ..database import Base
from ..utils.timeutils import utcnow

OPEN_RENTAL_STATUSES = ("active", "reserved")


class Rental(Base):
    """A vehicle rental contract."""
    
    __tablename__ = "rentals"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    rental_code = Column(String(50), nullable=False, unique=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)
    status = Column(String(20), nullable=False, default="reserved")  # reserved, active, completed, cancelled, overdue
    created_at = Column(DateTime, default=utcnow)
    
    customer = relationship("Customer")
    vehicle = relationship("Vehicle")
