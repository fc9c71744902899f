"""
Notification handlers subscribed to the event bus at startup

Shift events become structured log lines. Geofence transitions are also kept
per user until they expire, so a polling client can show the banner.
"""

from datetime import datetime
from typing import Callable, Dict, Optional
import uuid

import structlog

from careshift.core.events import EventBus, GeofenceTransition, ShiftCompleted, ShiftStarted
from careshift.core.timeutils import utcnow

logger = structlog.get_logger(__name__)


class NotificationFeed:
    """Latest unexpired geofence notification per user"""

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self.clock = clock
        self._latest: Dict[uuid.UUID, GeofenceTransition] = {}

    async def on_geofence_transition(self, event: GeofenceTransition) -> None:
        if event.user_id is not None:
            self._latest[event.user_id] = event

    def current(self, user_id: uuid.UUID) -> Optional[GeofenceTransition]:
        event = self._latest.get(user_id)
        if event is None:
            return None
        if event.is_expired(self.clock()):
            del self._latest[user_id]
            return None
        return event

    def clear(self, user_id: uuid.UUID) -> None:
        self._latest.pop(user_id, None)


async def log_shift_started(event: ShiftStarted) -> None:
    logger.info(
        f"Shift {event.shift_id} started by {event.user_id}"
        + (f" at location {event.location_id}" if event.location_id else "")
    )


async def log_shift_completed(event: ShiftCompleted) -> None:
    logger.info(
        f"Shift {event.shift_id} completed by {event.user_id}: {event.total_hours}h "
        f"({event.total_shifts} shifts, {event.average_hours}h average)"
    )


async def log_geofence_transition(event: GeofenceTransition) -> None:
    logger.info(f"Geofence notification for {event.user_id}: {event.message}")


def register_notification_handlers(bus: EventBus, feed: NotificationFeed) -> None:
    bus.subscribe(ShiftStarted, log_shift_started)
    bus.subscribe(ShiftCompleted, log_shift_completed)
    bus.subscribe(GeofenceTransition, log_geofence_transition)
    bus.subscribe(GeofenceTransition, feed.on_geofence_transition)
