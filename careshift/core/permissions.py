"""
Access policy for the two care roles

Every role gate goes through AccessPolicy, which returns a tagged Decision
instead of a bare boolean so the denial reason travels with it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Set

import structlog

from careshift.core.exceptions import PermissionDeniedError
from careshift.models.location import Location
from careshift.models.user import User, UserRole

logger = structlog.get_logger(__name__)


class Permission(str, Enum):
    """Permission definitions"""
    # Shift permissions
    SHIFT_CLOCK = "shift:clock"
    SHIFT_EDIT_NOTE = "shift:edit_note"
    SHIFT_VIEW_OWN = "shift:view_own"
    SHIFT_VIEW_ALL = "shift:view_all"

    # User permissions
    USER_VIEW_ALL = "user:view_all"
    USER_CHANGE_OWN_ROLE = "user:change_own_role"

    # Location permissions
    LOCATION_VIEW = "location:view"
    LOCATION_CREATE = "location:create"
    LOCATION_MANAGE_ANY = "location:manage_any"


# Role permission mapping
ROLE_PERMISSIONS = {
    UserRole.CAREWORKER: {
        Permission.SHIFT_CLOCK,
        Permission.SHIFT_EDIT_NOTE,
        Permission.SHIFT_VIEW_OWN,
        Permission.USER_CHANGE_OWN_ROLE,
        Permission.LOCATION_VIEW,
        Permission.LOCATION_CREATE,
    },
    UserRole.MANAGER: {
        Permission.SHIFT_VIEW_OWN,
        Permission.SHIFT_VIEW_ALL,
        Permission.USER_VIEW_ALL,
        Permission.USER_CHANGE_OWN_ROLE,
        Permission.LOCATION_VIEW,
        Permission.LOCATION_CREATE,
        Permission.LOCATION_MANAGE_ANY,
    },
}

# Reasons surfaced to the caller when a role lacks a permission
DENIAL_REASONS = {
    Permission.SHIFT_CLOCK: "Only careworkers can create shifts",
    Permission.SHIFT_EDIT_NOTE: "Only careworkers can update shifts",
    Permission.SHIFT_VIEW_ALL: "Only managers can access all shifts",
    Permission.USER_VIEW_ALL: "Only managers can access all users",
}


def get_permissions_for_role(role: UserRole) -> Set[Permission]:
    """Get permissions for a given role"""
    return ROLE_PERMISSIONS.get(UserRole(role), set())


def has_permission(required_permission: Permission, user_permissions: Set[Permission]) -> bool:
    """Check if user has required permission"""
    return required_permission in user_permissions


@dataclass(frozen=True)
class Decision:
    """Outcome of a policy check: Allow, or Deny with a reason"""
    allowed: bool
    reason: Optional[str] = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(allowed=False, reason=reason)

    def enforce(self) -> None:
        """Raise PermissionDeniedError for a Deny decision"""
        if not self.allowed:
            raise PermissionDeniedError(self.reason)


class AccessPolicy:
    """Maps a user to their role's permissions and ownership rules"""

    def check(self, user: User, permission: Permission, reason: Optional[str] = None) -> Decision:
        if has_permission(permission, get_permissions_for_role(user.role)):
            return Decision.allow()

        reason = reason or DENIAL_REASONS.get(permission, "Permission denied")
        logger.debug(f"Denied {permission.value} for user {user.id} ({UserRole(user.role).value})")
        return Decision.deny(reason)

    def check_location_ownership(self, user: User, location: Location) -> Decision:
        """Creator of a location, or any manager, may change it"""
        if location.created_by == user.id:
            return Decision.allow()
        if self.check(user, Permission.LOCATION_MANAGE_ANY).allowed:
            return Decision.allow()
        return Decision.deny("Permission denied")

    def check_shift_ownership(self, user: User, shift_owner_id) -> Decision:
        if shift_owner_id == user.id:
            return Decision.allow()
        return Decision.deny("You can only update your own shifts")

    def require(self, user: User, permission: Permission, reason: Optional[str] = None) -> None:
        self.check(user, permission, reason).enforce()
