"""
Authentication and service dependencies for FastAPI
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session
import structlog

from careshift.core.auth import Principal, verify_identity_token
from careshift.core.database import get_session
from careshift.core.exceptions import AuthenticationError
from careshift.core.events import EventBus
from careshift.core.permissions import AccessPolicy
from careshift.geo.geofence import GeofenceTracker
from careshift.geo.positioning import SimulatedRoutes
from careshift.models.user import User
from careshift.repositories import LocationRegistry, ShiftStore, UserStore
from careshift.services.locations import LocationService
from careshift.services.notifications import NotificationFeed
from careshift.services.shift_lifecycle import ShiftLifecycleManager
from careshift.services.statistics import StatisticsAggregator
from careshift.services.users import UserService

logger = structlog.get_logger(__name__)
security = HTTPBearer(auto_error=False)
policy = AccessPolicy()


async def get_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Principal:
    """Get the authenticated principal from the identity token"""
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    principal = verify_identity_token(credentials.credentials)
    if principal is None:
        raise AuthenticationError("Could not validate credentials")

    logger.debug(f"Principal authenticated: {principal.email}")
    return principal


def get_user_service(session: Session = Depends(get_session)) -> UserService:
    return UserService(session, UserStore(session), policy)


def get_current_user(
    principal: Principal = Depends(get_principal),
    users: UserService = Depends(get_user_service),
) -> User:
    """Resolve the principal to a user record, creating it on first login"""
    return users.find_or_create(principal)


def get_shift_manager(request: Request, session: Session = Depends(get_session)) -> ShiftLifecycleManager:
    shifts = ShiftStore(session)
    users = UserStore(session)
    return ShiftLifecycleManager(
        session=session,
        shifts=shifts,
        users=users,
        locations=LocationRegistry(session),
        statistics=StatisticsAggregator(shifts, users),
        policy=policy,
        clock=request.app.state.clock,
    )


def get_location_service(session: Session = Depends(get_session)) -> LocationService:
    return LocationService(session, LocationRegistry(session), ShiftStore(session), policy)


def get_shift_store(session: Session = Depends(get_session)) -> ShiftStore:
    return ShiftStore(session)


def get_event_bus(request: Request) -> EventBus:
    return request.app.state.event_bus


def get_geofence_tracker(request: Request) -> GeofenceTracker:
    return request.app.state.geofence_tracker


def get_simulated_routes(request: Request) -> SimulatedRoutes:
    return request.app.state.simulated_routes


def get_notification_feed(request: Request) -> NotificationFeed:
    return request.app.state.notification_feed


def get_policy() -> AccessPolicy:
    return policy
