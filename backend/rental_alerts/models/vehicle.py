"""Vehicle and VehicleType models - read-only for the alert engine."""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship

from ..database import Base
from ..utils.timeutils import utcnow


class VehicleType(Base):
    """Fleet category (sedan, SUV, van...) used for inventory thresholds."""
    
    __tablename__ = "vehicle_types"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True)
    description = Column(String, nullable=True)
    daily_rate = Column(Numeric(10, 2), nullable=False, default=0)
    
    vehicles = relationship("Vehicle", back_populates="vehicle_type")


class Vehicle(Base):
    """A fleet vehicle."""
    
    __tablename__ = "vehicles"
    
    id = Column(Integer, primary_key=True, autoincrement=True)
    make = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    license_plate = Column(String(20), nullable=False)
    vehicle_type_id = Column(Integer, ForeignKey("vehicle_types.id"), nullable=False)
    status = Column(String(20), nullable=False, default="available")  # available, rented, maintenance
    mileage = Column(Integer, default=0)
    insurance_expiry = Column(DateTime, nullable=True)
    next_maintenance = Column(DateTime, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow)
    
    vehicle_type = relationship("VehicleType", back_populates="vehicles")
    
    @property
    def description(self) -> str:
        return f"{self.make} {self.model} ({self.license_plate})"
