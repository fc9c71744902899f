from typing import List, Optional
import uuid

from sqlmodel import Session, select

from careshift.models.location import Location


class LocationRegistry:
    def __init__(self, session: Session):
        self.session = session

    def find_zone_by_id(self, location_id: uuid.UUID) -> Optional[Location]:
        return self.session.get(Location, location_id)

    def list_zones_for_principal(self) -> List[Location]:
        """All locations, newest first. Every authenticated user sees every zone."""
        return list(self.session.exec(
            select(Location).order_by(Location.created_at.desc())
        ).all())

    def add(self, location: Location) -> Location:
        self.session.add(location)
        self.session.flush()
        return location

    def delete(self, location: Location) -> None:
        self.session.delete(location)
        self.session.flush()
