"""
User model with the two care roles and cached shift statistics
"""

from sqlmodel import Field, SQLModel, Relationship
from datetime import datetime
from typing import Optional, TYPE_CHECKING
import uuid
from enum import Enum

from careshift.core.timeutils import utcnow
from careshift.models.types import UTCDateTime

if TYPE_CHECKING:
    from careshift.models.shift import Shift
    from careshift.models.location import Location


class UserRole(str, Enum):
    """User roles for access control"""
    CAREWORKER = "CAREWORKER"
    MANAGER = "MANAGER"


class User(SQLModel, table=True):
    """User record, created on first authentication"""

    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    # Profile (refreshed from the identity provider)
    name: str = Field(nullable=False, max_length=255)
    email: str = Field(index=True, unique=True, nullable=False, max_length=255)
    profile_pic_url: Optional[str] = Field(default=None, max_length=1000)

    role: UserRole = Field(default=UserRole.CAREWORKER, nullable=False, index=True)

    # Derived statistics, rewritten after every shift completion
    total_shifts: int = Field(default=0)
    average_hours: float = Field(default=0.0)
    last_clock_in: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)

    # Relationships
    shifts: list["Shift"] = Relationship(back_populates="user")
    locations: list["Location"] = Relationship(back_populates="creator")
