"""
Shift API endpoints
Handles clock-in, clock-out, notes, and the manager views
"""

from fastapi import APIRouter, Depends, status
from typing import List, Optional
import structlog
import uuid

from careshift.api.schemas import NoteUpdate, ShiftEnd, ShiftRead, ShiftStart, ShiftWithMessage
from careshift.core.dependencies import (
    get_current_user, get_event_bus, get_geofence_tracker, get_notification_feed,
    get_policy, get_shift_manager, get_shift_store, get_simulated_routes,
)
from careshift.core.events import EventBus, ShiftCompleted, ShiftStarted
from careshift.core.permissions import AccessPolicy, Permission
from careshift.geo.geofence import GeofenceTracker
from careshift.geo.positioning import SimulatedRoutes
from careshift.models.user import User
from careshift.repositories.shifts import ShiftStore
from careshift.services.notifications import NotificationFeed
from careshift.services.shift_lifecycle import ShiftLifecycleManager
from careshift.services.statistics import ShiftSummary, summarize

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post("", response_model=ShiftWithMessage, status_code=status.HTTP_201_CREATED)
async def start_shift(
    shift_data: ShiftStart,
    current_user: User = Depends(get_current_user),
    manager: ShiftLifecycleManager = Depends(get_shift_manager),
    event_bus: EventBus = Depends(get_event_bus),
):
    """Clock in, optionally at a registered location"""
    shift = manager.start_shift(
        current_user.id,
        location_id=shift_data.location_id,
        note=shift_data.note,
    )

    await event_bus.publish(ShiftStarted(
        shift_id=shift.id,
        user_id=shift.user_id,
        location_id=shift.location_id,
        started_at=shift.start_time,
    ))

    return ShiftWithMessage(
        shift=ShiftRead.model_validate(shift),
        message="Shift started successfully",
    )


@router.post("/end", response_model=ShiftWithMessage)
async def end_shift(
    shift_data: Optional[ShiftEnd] = None,
    current_user: User = Depends(get_current_user),
    manager: ShiftLifecycleManager = Depends(get_shift_manager),
    event_bus: EventBus = Depends(get_event_bus),
    tracker: GeofenceTracker = Depends(get_geofence_tracker),
    routes: SimulatedRoutes = Depends(get_simulated_routes),
    feed: NotificationFeed = Depends(get_notification_feed),
):
    """Clock out of the active shift and refresh statistics"""
    note = shift_data.note if shift_data else None
    completion = manager.end_shift(current_user.id, note=note)

    # The next shift starts outside every zone, at the top of the route
    tracker.reset(current_user.id)
    routes.discard(current_user.id)
    feed.clear(current_user.id)

    await event_bus.publish(ShiftCompleted(
        shift_id=completion.shift.id,
        user_id=completion.user.id,
        total_hours=completion.shift.total_hours,
        total_shifts=completion.user.total_shifts,
        average_hours=completion.user.average_hours,
    ))

    return ShiftWithMessage(
        shift=ShiftRead.model_validate(completion.shift),
        message=completion.message,
    )


@router.patch("/{shift_id}/note", response_model=ShiftWithMessage)
async def update_note(
    shift_id: uuid.UUID,
    note_data: NoteUpdate,
    current_user: User = Depends(get_current_user),
    manager: ShiftLifecycleManager = Depends(get_shift_manager),
):
    """Set or clear the note on one of your shifts"""
    shift = manager.update_note(shift_id, current_user.id, note=note_data.note)
    return ShiftWithMessage(
        shift=ShiftRead.model_validate(shift),
        message="Note updated successfully",
    )


@router.get("", response_model=List[ShiftRead])
async def list_my_shifts(
    current_user: User = Depends(get_current_user),
    shifts: ShiftStore = Depends(get_shift_store),
    policy: AccessPolicy = Depends(get_policy),
):
    """List your own shifts, newest first"""
    policy.require(current_user, Permission.SHIFT_VIEW_OWN)
    return [ShiftRead.model_validate(shift) for shift in shifts.list_for_user(current_user.id)]


@router.get("/active", response_model=Optional[ShiftRead])
async def get_active_shift(
    current_user: User = Depends(get_current_user),
    shifts: ShiftStore = Depends(get_shift_store),
):
    """Your IN_PROGRESS shift, or null"""
    shift = shifts.find_active_shift(current_user.id)
    return ShiftRead.model_validate(shift) if shift else None


@router.get("/all", response_model=List[ShiftRead])
async def list_all_shifts(
    current_user: User = Depends(get_current_user),
    shifts: ShiftStore = Depends(get_shift_store),
    policy: AccessPolicy = Depends(get_policy),
):
    """List every worker's shifts (managers)"""
    policy.require(current_user, Permission.SHIFT_VIEW_ALL)
    return [ShiftRead.model_validate(shift) for shift in shifts.list_all()]


@router.get("/summary", response_model=ShiftSummary)
async def shift_summary(
    current_user: User = Depends(get_current_user),
    shifts: ShiftStore = Depends(get_shift_store),
    policy: AccessPolicy = Depends(get_policy),
):
    """Aggregate shift figures with a per-day breakdown (managers)"""
    policy.require(current_user, Permission.SHIFT_VIEW_ALL)
    return summarize(shifts.list_all())
