"""
Locations model: named circular work zones
"""

from sqlmodel import Field, SQLModel, Relationship
from datetime import datetime
from typing import Optional, List, TYPE_CHECKING
import uuid

from careshift.core.timeutils import utcnow
from careshift.models.types import UTCDateTime

if TYPE_CHECKING:
    from careshift.models.shift import Shift
    from careshift.models.user import User


class Location(SQLModel, table=True):
    """Work site with a circular geofence"""

    __tablename__ = "locations"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(index=True, nullable=False, max_length=255)

    # Geofence center and radius
    latitude: float = Field(nullable=False, description="Center latitude, -90..90")
    longitude: float = Field(nullable=False, description="Center longitude, -180..180")
    radius: float = Field(nullable=False, description="Radius in kilometers")

    # Operating window, stored as entered (not enforced against shifts)
    start_time: str = Field(nullable=False, max_length=50)
    end_time: str = Field(nullable=False, max_length=50)

    created_by: uuid.UUID = Field(foreign_key="users.id", index=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)

    # Relationships
    creator: Optional["User"] = Relationship(back_populates="locations")
    shifts: List["Shift"] = Relationship(back_populates="location")

    @property
    def radius_meters(self) -> float:
        return self.radius * 1000
