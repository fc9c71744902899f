"""
Shift model for tracking a care worker's clock-in to clock-out session
"""

from sqlmodel import Field, SQLModel, Relationship
from sqlalchemy import Index, text
from datetime import datetime
from typing import Optional, TYPE_CHECKING
from enum import Enum
import uuid

from careshift.core.timeutils import hours_between, utcnow, weekday_name
from careshift.models.types import UTCDateTime

if TYPE_CHECKING:
    from careshift.models.user import User
    from careshift.models.location import Location


class ShiftStatus(str, Enum):
    """Status of a care worker shift"""
    SCHEDULED = "SCHEDULED"       # Declared, not produced by clock-in/out
    IN_PROGRESS = "IN_PROGRESS"   # Clocked in
    COMPLETED = "COMPLETED"       # Clocked out, hours recorded
    MISSED = "MISSED"             # Declared, not produced by clock-in/out


ACTIVE_SHIFT_CONDITION = "status = 'IN_PROGRESS'"


class Shift(SQLModel, table=True):
    """Care worker shift - one continuous work session"""

    __tablename__ = "shifts"
    __table_args__ = (
        # One IN_PROGRESS shift per user, enforced by the store
        Index(
            "uq_shift_user_in_progress",
            "user_id",
            unique=True,
            sqlite_where=text(ACTIVE_SHIFT_CONDITION),
            postgresql_where=text(ACTIVE_SHIFT_CONDITION),
        ),
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)

    # Owner and work site
    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
        description="Care worker who owns this shift"
    )
    location_id: Optional[uuid.UUID] = Field(
        default=None,
        foreign_key="locations.id",
        nullable=True,
        index=True,
        description="Work site, if the shift was started at one"
    )

    # Calendar
    date: datetime = Field(sa_type=UTCDateTime, description="When the shift was started")
    day: str = Field(max_length=20, description="Weekday name of date")

    # Timing
    start_time: datetime = Field(sa_type=UTCDateTime)
    end_time: datetime = Field(sa_type=UTCDateTime, description="Equal to start_time until completion")
    total_hours: float = Field(default=0.0)

    status: ShiftStatus = Field(
        default=ShiftStatus.IN_PROGRESS,
        index=True,
        description="Current status of the shift"
    )
    note: Optional[str] = Field(default=None, max_length=2000, nullable=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)

    # Relationships
    user: Optional["User"] = Relationship(back_populates="shifts")
    location: Optional["Location"] = Relationship(back_populates="shifts")

    @classmethod
    def begin(
        cls,
        user_id: uuid.UUID,
        now: datetime,
        location_id: Optional[uuid.UUID] = None,
        note: Optional[str] = None,
    ) -> "Shift":
        """Build a freshly clocked-in shift"""
        return cls(
            user_id=user_id,
            location_id=location_id,
            date=now,
            day=weekday_name(now),
            start_time=now,
            end_time=now,
            total_hours=0.0,
            status=ShiftStatus.IN_PROGRESS,
            note=note or None,
        )

    # State machine methods
    def can_transition_to(self, new_status: ShiftStatus) -> tuple[bool, str]:
        """Check if shift can transition to new status"""
        valid_transitions = {
            ShiftStatus.SCHEDULED: [],
            ShiftStatus.IN_PROGRESS: [ShiftStatus.COMPLETED],
            ShiftStatus.COMPLETED: [],  # Final state
            ShiftStatus.MISSED: [],
        }

        if new_status in valid_transitions.get(self.status, []):
            return True, "Can transition"
        return False, f"Cannot transition from {self.status.value} to {new_status.value}"

    def complete(self, now: datetime, note: Optional[str] = None) -> None:
        """Clock out: record end time and hours worked"""
        allowed, reason = self.can_transition_to(ShiftStatus.COMPLETED)
        if not allowed:
            raise ValueError(reason)

        self.total_hours = hours_between(self.start_time, now)
        self.end_time = now
        self.status = ShiftStatus.COMPLETED
        if note:
            self.note = note
        self.updated_at = now

    def is_active(self) -> bool:
        """Check if shift is in progress"""
        return self.status == ShiftStatus.IN_PROGRESS
