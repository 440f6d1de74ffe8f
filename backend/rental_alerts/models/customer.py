"""Customer model - read-only for the alert engine."""
from sqlalchemy import Column, Integer, String, Boolean, DateTime

from ..database import Base
from ..utils.timeutils import utcnow


class Customer(Base):
    """A renting customer; used to label rental, payment and quote alerts."""
    
    __tablename__ = "customers"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    contact_person = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(20), nullable=True)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=utcnow)
    
    @property
    def display_name(self) -> str:
        return self.name or self.contact_person or ""
