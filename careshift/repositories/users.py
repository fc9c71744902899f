from datetime import datetime
from typing import List, Optional, Union
import uuid

from sqlmodel import Session, select

from careshift.core.timeutils import utcnow
from careshift.models.user import User


class UserStore:
    def __init__(self, session: Session):
        self.session = session

    def get_user(self, id_or_email: Union[uuid.UUID, str]) -> Optional[User]:
        """Look a user up by id, or by email when given a string"""
        if isinstance(id_or_email, uuid.UUID):
            return self.session.get(User, id_or_email)
        return self.session.exec(
            select(User).where(User.email == id_or_email)
        ).first()

    def add(self, user: User) -> User:
        self.session.add(user)
        self.session.flush()
        return user

    def update_user_stats(
        self,
        user_id: uuid.UUID,
        total_shifts: Optional[int] = None,
        average_hours: Optional[float] = None,
        last_clock_in: Optional[datetime] = None,
    ) -> Optional[User]:
        """Write the cached statistics fields; None leaves a field unchanged"""
        user = self.session.get(User, user_id)
        if user is None:
            return None

        if total_shifts is not None:
            user.total_shifts = total_shifts
        if average_hours is not None:
            user.average_hours = average_hours
        if last_clock_in is not None:
            user.last_clock_in = last_clock_in
        user.updated_at = utcnow()

        self.session.add(user)
        self.session.flush()
        return user

    def list_all(self) -> List[User]:
        return list(self.session.exec(
            select(User).order_by(User.created_at.desc())
        ).all())
