"""
API schemas for Shift, Location, User and geofence requests
"""

from sqlmodel import SQLModel
from datetime import datetime
from typing import Optional
import uuid

from careshift.core.events import GeofenceTransitionType
from careshift.geo.geofence import LiveCoordinate
from careshift.models.shift import ShiftStatus
from careshift.models.user import UserRole

# ============================================================================
# Location Schemas
# ============================================================================

class LocationCreate(SQLModel):
    # Presence is checked by the service so a missing field reports
    # "All fields are required" rather than a schema error
    name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radius: Optional[float] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None


class LocationUpdate(SQLModel):
    name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radius: Optional[float] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None


class LocationRead(SQLModel):
    id: uuid.UUID
    name: str
    latitude: float
    longitude: float
    radius: float
    start_time: str
    end_time: str
    created_by: uuid.UUID
    created_at: datetime
    updated_at: Optional[datetime] = None


class LocationWithMessage(SQLModel):
    location: LocationRead
    message: str


class LocationDeleted(SQLModel):
    message: str
    detached_shifts: int


# ============================================================================
# User Schemas
# ============================================================================

class UserRead(SQLModel):
    id: uuid.UUID
    name: str
    email: str
    profile_pic_url: Optional[str] = None
    role: UserRole
    total_shifts: int
    average_hours: float
    last_clock_in: Optional[datetime] = None
    created_at: datetime


class RoleUpdate(SQLModel):
    role: str


class UserSummary(SQLModel):
    id: uuid.UUID
    name: str
    email: str
    role: UserRole


class UserWithMessage(SQLModel):
    user: UserRead
    message: str


# ============================================================================
# Shift Schemas
# ============================================================================

class ShiftStart(SQLModel):
    location_id: Optional[uuid.UUID] = None
    note: Optional[str] = None


class ShiftEnd(SQLModel):
    note: Optional[str] = None


class NoteUpdate(SQLModel):
    note: Optional[str] = None


class ShiftRead(SQLModel):
    id: uuid.UUID
    user_id: uuid.UUID
    location_id: Optional[uuid.UUID] = None
    date: datetime
    day: str
    start_time: datetime
    end_time: datetime
    total_hours: float
    status: ShiftStatus
    note: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    # Related records
    location: Optional[LocationRead] = None
    user: Optional[UserSummary] = None


class ShiftWithMessage(SQLModel):
    shift: ShiftRead
    message: str


# ============================================================================
# Geofence Schemas
# ============================================================================

class GeofenceEvaluateRequest(SQLModel):
    coordinate: Optional[LiveCoordinate] = None


class GeofenceEvent(SQLModel):
    event_id: uuid.UUID
    transition: GeofenceTransitionType
    zone_id: Optional[uuid.UUID] = None
    zone_name: str
    radius_km: float
    distance_meters: float
    message: str
    occurred_at: datetime
    expires_at: datetime


class GeofenceResult(SQLModel):
    event: Optional[GeofenceEvent] = None
    inside: bool = False
    distance_meters: Optional[float] = None
    coordinate: Optional[LiveCoordinate] = None
