"""
Geofence API endpoints

Clients poll with their live coordinate while a shift is active. The zone is
the one the active shift was started at; a transition is reported only when
the worker crosses its boundary.
"""

from fastapi import APIRouter, Depends
from typing import Optional
import structlog

from careshift.api.schemas import GeofenceEvaluateRequest, GeofenceEvent, GeofenceResult
from careshift.core.config import Settings, get_settings
from careshift.core.dependencies import (
    get_current_user, get_event_bus, get_geofence_tracker,
    get_location_service, get_notification_feed, get_shift_store, get_simulated_routes,
)
from careshift.core.events import EventBus, GeofenceTransition
from careshift.geo.geofence import GeofenceTracker, LiveCoordinate, Zone
from careshift.geo.positioning import SimulatedRoutes, acquire_position
from careshift.models.user import User
from careshift.repositories.shifts import ShiftStore
from careshift.services.locations import LocationService
from careshift.services.notifications import NotificationFeed

logger = structlog.get_logger(__name__)
router = APIRouter()


def _active_zone(
    user: User,
    shifts: ShiftStore,
    locations: LocationService,
) -> Optional[Zone]:
    shift = shifts.find_active_shift(user.id)
    if shift is None:
        return None
    location = locations.zone_for_shift(shift.location_id)
    if location is None:
        return None
    return Zone.from_location(location)


def _event_schema(transition: GeofenceTransition) -> GeofenceEvent:
    return GeofenceEvent(
        event_id=transition.event_id,
        transition=transition.transition,
        zone_id=transition.zone_id,
        zone_name=transition.zone_name,
        radius_km=transition.radius_km,
        distance_meters=transition.distance_meters,
        message=transition.message,
        occurred_at=transition.occurred_at,
        expires_at=transition.expires_at,
    )


async def _evaluate(
    user: User,
    coordinate: Optional[LiveCoordinate],
    zone: Optional[Zone],
    tracker: GeofenceTracker,
    event_bus: EventBus,
) -> GeofenceResult:
    if coordinate is None or zone is None:
        return GeofenceResult(coordinate=coordinate)

    transition = tracker.evaluate(user.id, coordinate, zone)
    evaluator = tracker.evaluator_for(user.id, zone)

    event = None
    if transition is not None:
        await event_bus.publish(transition)
        event = _event_schema(transition)

    return GeofenceResult(
        event=event,
        inside=evaluator.inside,
        distance_meters=evaluator.last_distance,
        coordinate=coordinate,
    )


@router.post("/evaluate", response_model=GeofenceResult)
async def evaluate_geofence(
    request_data: GeofenceEvaluateRequest,
    current_user: User = Depends(get_current_user),
    shifts: ShiftStore = Depends(get_shift_store),
    locations: LocationService = Depends(get_location_service),
    tracker: GeofenceTracker = Depends(get_geofence_tracker),
    event_bus: EventBus = Depends(get_event_bus),
):
    """Evaluate a live coordinate against the active shift's work zone"""
    zone = _active_zone(current_user, shifts, locations)
    return await _evaluate(current_user, request_data.coordinate, zone, tracker, event_bus)


@router.post("/simulate", response_model=GeofenceResult)
async def simulate_geofence(
    current_user: User = Depends(get_current_user),
    shifts: ShiftStore = Depends(get_shift_store),
    locations: LocationService = Depends(get_location_service),
    tracker: GeofenceTracker = Depends(get_geofence_tracker),
    event_bus: EventBus = Depends(get_event_bus),
    routes: SimulatedRoutes = Depends(get_simulated_routes),
    settings: Settings = Depends(get_settings),
):
    """Advance the caller's simulated route one step and evaluate it"""
    route = routes.route_for(current_user.id)

    fallback = LiveCoordinate(
        latitude=settings.DEFAULT_LATITUDE,
        longitude=settings.DEFAULT_LONGITUDE,
        accuracy=settings.DEFAULT_ACCURACY_METERS,
    )
    coordinate = await acquire_position(
        route.next_position,
        timeout=settings.GEOLOCATION_TIMEOUT_SECONDS,
        fallback=fallback,
    )
    logger.debug(f"Simulated position for {current_user.id}: step {route.index}")

    zone = _active_zone(current_user, shifts, locations)
    return await _evaluate(current_user, coordinate, zone, tracker, event_bus)


@router.get("/notification", response_model=Optional[GeofenceEvent])
async def current_notification(
    current_user: User = Depends(get_current_user),
    feed: NotificationFeed = Depends(get_notification_feed),
):
    """The caller's latest boundary notification while it is still on display"""
    transition = feed.current(current_user.id)
    return _event_schema(transition) if transition else None
