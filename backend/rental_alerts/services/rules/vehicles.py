"""Fleet rules: maintenance due, insurance expiring, low inventory per vehicle type."""
from datetime import timedelta

from sqlalchemy import select, func

from ...models import AlertType, Severity, Vehicle, VehicleType
from ...utils.timeutils import whole_days
from .base import AlertDraft, DetectionRule, fmt_date

MAINTENANCE_LOOKAHEAD = timedelta(days=30)
INSURANCE_LOOKAHEAD = timedelta(days=30)
INSURANCE_CRITICAL_DAYS = 7
LOW_INVENTORY_THRESHOLD = 2


def _vehicle_metadata(vehicle: Vehicle) -> dict:
    return {
        "vehicleMake": vehicle.make,
        "vehicleModel": vehicle.model,
        "licensePlate": vehicle.license_plate,
    }


class MaintenanceDueRule(DetectionRule):
    """Active vehicles with maintenance past due or due within 30 days."""
    
    name = "maintenance_due"
    alert_type = AlertType.MAINTENANCE_DUE.value
    entity_type = "vehicle"
    
    async def find_candidates(self, session, now):
        result = await session.execute(
            select(Vehicle).where(
                Vehicle.is_active.is_(True),
                Vehicle.next_maintenance.is_not(None),
                Vehicle.next_maintenance <= now + MAINTENANCE_LOOKAHEAD,
            )
        )
        return result.scalars().all()
    
    def render(self, vehicle, now):
        is_past_due = vehicle.next_maintenance < now
        due = fmt_date(vehicle.next_maintenance)
        if is_past_due:
            title = "Maintenance Overdue"
            message = (
                f"Vehicle {vehicle.description} has had maintenance overdue since {due}. "
                f"Mileage: {vehicle.mileage} km."
            )
        else:
            days_until = whole_days(vehicle.next_maintenance - now)
            title = "Maintenance Due Soon"
            message = (
                f"Vehicle {vehicle.description} needs maintenance in {days_until} days ({due}). "
                f"Mileage: {vehicle.mileage} km."
            )
        
        return AlertDraft(
            entity_id=str(vehicle.id),
            severity=Severity.CRITICAL.value if is_past_due else Severity.WARNING.value,
            title=title,
            message=message,
            metadata={
                **_vehicle_metadata(vehicle),
                "nextMaintenance": vehicle.next_maintenance,
                "mileage": vehicle.mileage,
                "isPastDue": is_past_due,
            },
        )


class ExpiringInsuranceRule(DetectionRule):
    """Active vehicles whose insurance expires within the next 30 days."""
    
    name = "insurance_expiring"
    alert_type = AlertType.INSURANCE_EXPIRING.value
    entity_type = "vehicle"
    
    async def find_candidates(self, session, now):
        result = await session.execute(
            select(Vehicle).where(
                Vehicle.is_active.is_(True),
                Vehicle.insurance_expiry >= now,
                Vehicle.insurance_expiry <= now + INSURANCE_LOOKAHEAD,
            )
        )
        return result.scalars().all()
    
    def render(self, vehicle, now):
        days_until = whole_days(vehicle.insurance_expiry - now)
        return AlertDraft(
            entity_id=str(vehicle.id),
            severity=(
                Severity.CRITICAL.value if days_until <= INSURANCE_CRITICAL_DAYS
                else Severity.WARNING.value
            ),
            title="Insurance Expiring",
            message=(
                f"Insurance for vehicle {vehicle.description} expires in {days_until} days "
                f"({fmt_date(vehicle.insurance_expiry)})."
            ),
            metadata={
                **_vehicle_metadata(vehicle),
                "insuranceExpiry": vehicle.insurance_expiry,
                "daysUntilExpiry": days_until,
            },
        )


class LowInventoryRule(DetectionRule):
    """Vehicle types with fewer than LOW_INVENTORY_THRESHOLD available vehicles.
    
    Availability comes from a single grouped count; types with no available
    vehicles are absent from it and count as zero.
    """
    
    name = "low_inventory"
    alert_type = AlertType.LOW_INVENTORY.value
    entity_type = "vehicle_type"
    
    async def find_candidates(self, session, now):
        types_result = await session.execute(select(VehicleType).order_by(VehicleType.id))
        vehicle_types = types_result.scalars().all()
        
        counts_result = await session.execute(
            select(Vehicle.vehicle_type_id, func.count(Vehicle.id))
            .where(Vehicle.status == "available", Vehicle.is_active.is_(True))
            .group_by(Vehicle.vehicle_type_id)
        )
        available_by_type = {type_id: count for type_id, count in counts_result.all()}
        
        candidates = []
        for vehicle_type in vehicle_types:
            available = available_by_type.get(vehicle_type.id, 0)
            if available < LOW_INVENTORY_THRESHOLD:
                candidates.append((vehicle_type, available))
        return candidates
    
    def entity_key(self, candidate):
        vehicle_type, _ = candidate
        return str(vehicle_type.id)
    
    def render(self, candidate, now):
        vehicle_type, available = candidate
        return AlertDraft(
            entity_id=str(vehicle_type.id),
            severity=Severity.CRITICAL.value if available == 0 else Severity.WARNING.value,
            title="Low Inventory",
            message=(
                f"Only {available} vehicle(s) of type \"{vehicle_type.name}\" available. "
                f"Consider reviewing availability."
            ),
            metadata={
                "vehicleTypeName": vehicle_type.name,
                "availableCount": available,
                "threshold": LOW_INVENTORY_THRESHOLD,
            },
        )
