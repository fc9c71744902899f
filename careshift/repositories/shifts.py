from typing import List, Optional
import uuid

from sqlmodel import Session, select

from careshift.core.timeutils import utcnow
from careshift.models.shift import Shift, ShiftStatus


class ShiftStore:
    def __init__(self, session: Session):
        self.session = session

    def get(self, shift_id: uuid.UUID) -> Optional[Shift]:
        return self.session.get(Shift, shift_id)

    def find_active_shift(self, user_id: uuid.UUID) -> Optional[Shift]:
        return self.session.exec(
            select(Shift).where(
                (Shift.user_id == user_id) &
                (Shift.status == ShiftStatus.IN_PROGRESS)
            )
        ).first()

    def create_shift(self, shift: Shift) -> Shift:
        """Insert a shift; the partial unique index may reject it on flush"""
        self.session.add(shift)
        self.session.flush()
        return shift

    def update_shift(self, shift: Shift) -> Shift:
        self.session.add(shift)
        self.session.flush()
        return shift

    def list_completed_shifts(self, user_id: uuid.UUID) -> List[Shift]:
        return list(self.session.exec(
            select(Shift).where(
                (Shift.user_id == user_id) &
                (Shift.status == ShiftStatus.COMPLETED)
            )
        ).all())

    def list_for_user(self, user_id: uuid.UUID) -> List[Shift]:
        return list(self.session.exec(
            select(Shift)
            .where(Shift.user_id == user_id)
            .order_by(Shift.created_at.desc())
        ).all())

    def list_all(self) -> List[Shift]:
        return list(self.session.exec(
            select(Shift).order_by(Shift.created_at.desc())
        ).all())

    def detach_location(self, location_id: uuid.UUID) -> int:
        """Clear the location reference on every shift pointing at it"""
        shifts = self.session.exec(
            select(Shift).where(Shift.location_id == location_id)
        ).all()
        now = utcnow()
        for shift in shifts:
            shift.location_id = None
            shift.updated_at = now
            self.session.add(shift)
        self.session.flush()
        return len(shifts)
