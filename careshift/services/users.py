"""
User service: principal synchronization and self-service role changes
"""

from typing import List

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session
import structlog

from careshift.core.auth import Principal
from careshift.core.exceptions import ValidationError
from careshift.core.permissions import AccessPolicy, Permission
from careshift.core.timeutils import utcnow
from careshift.models.user import User, UserRole
from careshift.repositories.users import UserStore

logger = structlog.get_logger(__name__)


class UserService:
    def __init__(self, session: Session, users: UserStore, policy: AccessPolicy):
        self.session = session
        self.users = users
        self.policy = policy

    def find_or_create(self, principal: Principal, refresh_profile: bool = False) -> User:
        """Resolve the principal's user record, creating it on first sight

        New users start as CAREWORKER. With refresh_profile, an existing
        record takes the name and picture currently held by the identity
        provider.
        """
        email = str(principal.email)
        user = self.users.get_user(email)

        if user is None:
            user = User(
                name=principal.name or email,
                email=email,
                profile_pic_url=principal.picture,
            )
            try:
                self.users.add(user)
                self.session.commit()
            except IntegrityError:
                # Concurrent first login created the record already
                self.session.rollback()
                return self.users.get_user(email)
            self.session.refresh(user)
            logger.info(f"User created on first login: {user.id}")
            return user

        if refresh_profile:
            user.name = principal.name or email
            user.profile_pic_url = principal.picture
            user.updated_at = utcnow()
            self.users.add(user)
            self.session.commit()
            self.session.refresh(user)

        return user

    def change_role(self, user: User, role: str) -> User:
        """Self-service role change. There is no approval step."""
        self.policy.require(user, Permission.USER_CHANGE_OWN_ROLE)
        try:
            new_role = UserRole(role)
        except ValueError:
            raise ValidationError("Invalid role. Must be CAREWORKER or MANAGER")

        previous = UserRole(user.role)
        user.role = new_role
        user.updated_at = utcnow()
        self.users.add(user)
        self.session.commit()
        self.session.refresh(user)

        if new_role == UserRole.MANAGER and previous != UserRole.MANAGER:
            logger.warning(f"User {user.id} elevated themselves to MANAGER")
        else:
            logger.info(f"User {user.id} role set to {new_role.value}")
        return user

    def list_users(self, user: User) -> List[User]:
        self.policy.require(user, Permission.USER_VIEW_ALL)
        return self.users.list_all()
