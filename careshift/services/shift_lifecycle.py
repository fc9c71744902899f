"""
Shift lifecycle: clock in, clock out, and post-hoc notes

States per shift: NONE -> IN_PROGRESS -> COMPLETED. A worker may hold at most
one IN_PROGRESS shift; the check here is backed by a partial unique index, so
a racing second clock-in is rejected by the store as well.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional
import uuid

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session
import structlog

from careshift.core.exceptions import AuthenticationError, ConflictError, NotFoundError
from careshift.core.permissions import AccessPolicy, Permission
from careshift.core.timeutils import utcnow
from careshift.models.shift import Shift
from careshift.models.user import User
from careshift.repositories.locations import LocationRegistry
from careshift.repositories.shifts import ShiftStore
from careshift.repositories.users import UserStore
from careshift.services.statistics import StatisticsAggregator

logger = structlog.get_logger(__name__)

ACTIVE_SHIFT_EXISTS = "You already have an active shift. Please end it first."
CAREWORKERS_ONLY_UPDATE = "Only careworkers can update shifts"


@dataclass
class ShiftCompletion:
    """Completed shift plus the summary shown to the worker"""
    shift: Shift
    user: User
    message: str


class ShiftLifecycleManager:
    def __init__(
        self,
        session: Session,
        shifts: ShiftStore,
        users: UserStore,
        locations: LocationRegistry,
        statistics: StatisticsAggregator,
        policy: AccessPolicy,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.session = session
        self.shifts = shifts
        self.users = users
        self.locations = locations
        self.statistics = statistics
        self.policy = policy
        self.clock = clock

    def _resolve_user(self, user_id: uuid.UUID) -> User:
        user = self.users.get_user(user_id)
        if user is None:
            raise AuthenticationError("Unknown user")
        return user

    def start_shift(
        self,
        user_id: uuid.UUID,
        location_id: Optional[uuid.UUID] = None,
        note: Optional[str] = None,
    ) -> Shift:
        """Clock a care worker in, optionally at a registered location"""
        user = self._resolve_user(user_id)
        self.policy.require(user, Permission.SHIFT_CLOCK)

        if self.shifts.find_active_shift(user.id) is not None:
            raise ConflictError(ACTIVE_SHIFT_EXISTS)

        if location_id is not None and self.locations.find_zone_by_id(location_id) is None:
            raise NotFoundError("Location not found")

        now = self.clock()
        shift = Shift.begin(user.id, now, location_id=location_id, note=note)

        try:
            self.shifts.create_shift(shift)
            self.users.update_user_stats(user.id, last_clock_in=now)
            self.session.commit()
        except IntegrityError:
            # Another request clocked this user in between the check and the insert
            self.session.rollback()
            raise ConflictError(ACTIVE_SHIFT_EXISTS)

        self.session.refresh(shift)
        logger.info(f"Shift started: {shift.id} for user {user.id}")
        return shift

    def end_shift(self, user_id: uuid.UUID, note: Optional[str] = None) -> ShiftCompletion:
        """Clock a care worker out and refresh their statistics"""
        user = self._resolve_user(user_id)
        self.policy.require(user, Permission.SHIFT_CLOCK, CAREWORKERS_ONLY_UPDATE)

        shift = self.shifts.find_active_shift(user.id)
        if shift is None:
            raise NotFoundError("No active shift found")

        shift.complete(self.clock(), note=note)
        self.shifts.update_shift(shift)

        # Completion and statistics commit together; a failed recompute
        # leaves the shift IN_PROGRESS
        self.statistics.recompute(user.id)
        self.session.commit()

        self.session.refresh(shift)
        self.session.refresh(user)
        logger.info(f"Shift completed: {shift.id} ({shift.total_hours}h) for user {user.id}")
        return ShiftCompletion(
            shift=shift,
            user=user,
            message=f"Shift completed! Total hours: {shift.total_hours:g}",
        )

    def update_note(
        self,
        shift_id: uuid.UUID,
        caller_id: uuid.UUID,
        note: Optional[str] = None,
    ) -> Shift:
        """Set or clear the note on one of the caller's shifts, in any state"""
        user = self._resolve_user(caller_id)
        self.policy.require(user, Permission.SHIFT_EDIT_NOTE, CAREWORKERS_ONLY_UPDATE)

        shift = self.shifts.get(shift_id)
        if shift is None:
            raise NotFoundError("Shift not found")

        self.policy.check_shift_ownership(user, shift.user_id).enforce()

        shift.note = note or None
        shift.updated_at = self.clock()
        self.shifts.update_shift(shift)
        self.session.commit()
        self.session.refresh(shift)

        logger.info(f"Shift note updated: {shift.id}")
        return shift
