"""Database models."""
from .alert import Alert, AlertType, Severity
from .customer import Customer
from .vehicle import Vehicle, VehicleType
from .rental import Rental
from .payment import Payment
from .quote import Quote
from .lead import Lead

__all__ = [
    "Alert", "AlertType", "Severity", "Customer", "Vehicle", "VehicleType",
    "Rental", "Payment", "Quote", "Lead",
]
