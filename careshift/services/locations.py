"""
Location registry service: validated CRUD of circular work zones
"""

from typing import Any, Dict, List, Optional
import uuid

from sqlmodel import Session
import structlog

from careshift.core.exceptions import NotFoundError, ValidationError
from careshift.core.permissions import AccessPolicy, Permission
from careshift.core.timeutils import utcnow
from careshift.models.location import Location
from careshift.models.user import User
from careshift.repositories.locations import LocationRegistry
from careshift.repositories.shifts import ShiftStore

logger = structlog.get_logger(__name__)

REQUIRED_FIELDS = ("name", "latitude", "longitude", "start_time", "end_time", "radius")
EDITABLE_FIELDS = REQUIRED_FIELDS


def validate_zone_fields(fields: Dict[str, Any]) -> None:
    """Range checks for a zone definition"""
    missing = [f for f in REQUIRED_FIELDS if fields.get(f) is None or fields.get(f) == ""]
    if missing:
        raise ValidationError("All fields are required")

    try:
        latitude = float(fields["latitude"])
        longitude = float(fields["longitude"])
        radius = float(fields["radius"])
    except (TypeError, ValueError):
        raise ValidationError("Latitude, longitude and radius must be numbers")

    if not -90 <= latitude <= 90:
        raise ValidationError("Latitude must be between -90 and 90")
    if not -180 <= longitude <= 180:
        raise ValidationError("Longitude must be between -180 and 180")
    if not radius > 0:
        raise ValidationError("Radius must be greater than 0")


class LocationService:
    def __init__(
        self,
        session: Session,
        locations: LocationRegistry,
        shifts: ShiftStore,
        policy: AccessPolicy,
    ):
        self.session = session
        self.locations = locations
        self.shifts = shifts
        self.policy = policy

    def list_locations(self, user: User) -> List[Location]:
        self.policy.require(user, Permission.LOCATION_VIEW)
        return self.locations.list_zones_for_principal()

    def get_location(self, location_id: uuid.UUID) -> Location:
        location = self.locations.find_zone_by_id(location_id)
        if location is None:
            raise NotFoundError("Location not found")
        return location

    def create_location(self, user: User, fields: Dict[str, Any]) -> Location:
        self.policy.require(user, Permission.LOCATION_CREATE)
        validate_zone_fields(fields)

        location = Location(
            name=fields["name"],
            latitude=float(fields["latitude"]),
            longitude=float(fields["longitude"]),
            radius=float(fields["radius"]),
            start_time=fields["start_time"],
            end_time=fields["end_time"],
            created_by=user.id,
        )
        self.locations.add(location)
        self.session.commit()
        self.session.refresh(location)

        logger.info(f"Location created: {location.id} by user {user.id}")
        return location

    def update_location(
        self,
        user: User,
        location_id: uuid.UUID,
        changes: Dict[str, Any],
    ) -> Location:
        """Apply a partial update; the merged zone is re-validated"""
        location = self.get_location(location_id)
        self.policy.check_location_ownership(user, location).enforce()

        merged = {f: getattr(location, f) for f in EDITABLE_FIELDS}
        merged.update({k: v for k, v in changes.items() if k in EDITABLE_FIELDS and v is not None})
        validate_zone_fields(merged)

        location.name = merged["name"]
        location.latitude = float(merged["latitude"])
        location.longitude = float(merged["longitude"])
        location.radius = float(merged["radius"])
        location.start_time = merged["start_time"]
        location.end_time = merged["end_time"]
        location.updated_at = utcnow()

        self.locations.add(location)
        self.session.commit()
        self.session.refresh(location)

        logger.info(f"Location updated: {location_id}")
        return location

    def delete_location(self, user: User, location_id: uuid.UUID) -> int:
        """Delete a location; shifts that referenced it keep their history
        with the reference cleared. Returns how many shifts were detached.
        """
        location = self.get_location(location_id)
        self.policy.check_location_ownership(user, location).enforce()

        detached = self.shifts.detach_location(location_id)
        self.locations.delete(location)
        self.session.commit()

        logger.info(f"Location deleted: {location_id} ({detached} shifts detached)")
        return detached

    def zone_for_shift(self, location_id: Optional[uuid.UUID]) -> Optional[Location]:
        if location_id is None:
            return None
        return self.locations.find_zone_by_id(location_id)
