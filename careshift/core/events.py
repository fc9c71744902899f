"""
Domain events

Shift and geofence services describe what happened as events; the bus hands
them to whichever handlers were registered at startup (log lines, the
per-user notification feed).
"""

from collections import defaultdict
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type
import uuid
import structlog

from careshift.core.timeutils import utcnow

logger = structlog.get_logger(__name__)


class DomainEvent:
    """Base class for domain events"""

    def __init__(self, event_id: uuid.UUID = None):
        self.event_id = event_id or uuid.uuid4()
        self.occurred_at = utcnow()

    @property
    def name(self) -> str:
        return type(self).__name__

    def payload(self) -> Dict[str, Any]:
        """Event-specific fields, JSON-ready"""
        return {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": str(self.event_id),
            "event_type": self.name,
            "occurred_at": self.occurred_at.isoformat(),
            **self.payload(),
        }


class ShiftStarted(DomainEvent):
    """A care worker clocked in"""

    def __init__(
        self,
        shift_id: uuid.UUID,
        user_id: uuid.UUID,
        location_id: Optional[uuid.UUID],
        started_at: datetime,
        event_id: uuid.UUID = None
    ):
        super().__init__(event_id)
        self.shift_id = shift_id
        self.user_id = user_id
        self.location_id = location_id
        self.started_at = started_at

    def payload(self) -> Dict[str, Any]:
        return {
            "shift_id": str(self.shift_id),
            "user_id": str(self.user_id),
            "location_id": str(self.location_id) if self.location_id else None,
            "started_at": self.started_at.isoformat(),
        }


class ShiftCompleted(DomainEvent):
    """A care worker clocked out; carries their refreshed statistics"""

    def __init__(
        self,
        shift_id: uuid.UUID,
        user_id: uuid.UUID,
        total_hours: float,
        total_shifts: int,
        average_hours: float,
        event_id: uuid.UUID = None
    ):
        super().__init__(event_id)
        self.shift_id = shift_id
        self.user_id = user_id
        self.total_hours = total_hours
        self.total_shifts = total_shifts
        self.average_hours = average_hours

    def payload(self) -> Dict[str, Any]:
        return {
            "shift_id": str(self.shift_id),
            "user_id": str(self.user_id),
            "total_hours": self.total_hours,
            "total_shifts": self.total_shifts,
            "average_hours": self.average_hours,
        }


class GeofenceTransitionType(str, Enum):
    ENTERED = "ENTERED"
    EXITED = "EXITED"


class GeofenceTransition(DomainEvent):
    """A live coordinate crossed a work zone boundary

    Display-only: it expires after a fixed duration and changes no state.
    """

    def __init__(
        self,
        transition: GeofenceTransitionType,
        zone_name: str,
        radius_km: float,
        distance_meters: float,
        display_seconds: int = 5,
        zone_id: Optional[uuid.UUID] = None,
        user_id: Optional[uuid.UUID] = None,
        event_id: uuid.UUID = None
    ):
        super().__init__(event_id)
        self.transition = transition
        self.zone_name = zone_name
        self.radius_km = radius_km
        self.distance_meters = distance_meters
        self.zone_id = zone_id
        self.user_id = user_id
        self.expires_at = self.occurred_at + timedelta(seconds=display_seconds)

    @property
    def message(self) -> str:
        if self.transition == GeofenceTransitionType.ENTERED:
            return (
                f"Welcome to {self.zone_name}! You're now in the work area "
                f"({self.radius_km:g}km radius)."
            )
        return (
            f"You've left {self.zone_name}. Distance: {round(self.distance_meters)}m "
            f"(outside {self.radius_km:g}km radius)"
        )

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at

    def payload(self) -> Dict[str, Any]:
        return {
            "transition": self.transition.value,
            "zone_id": str(self.zone_id) if self.zone_id else None,
            "user_id": str(self.user_id) if self.user_id else None,
            "zone_name": self.zone_name,
            "radius_km": self.radius_km,
            "distance_meters": self.distance_meters,
            "message": self.message,
            "expires_at": self.expires_at.isoformat(),
        }


EventHandler = Callable[[DomainEvent], Awaitable[None]]


class EventBus:
    """In-process dispatch keyed by event class

    A handler registered for a base class also receives its subclasses. A
    failing handler is logged and does not stop the others.
    """

    def __init__(self):
        self._handlers: Dict[Type[DomainEvent], List[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)

    def unsubscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def handlers_for(self, event: DomainEvent) -> List[EventHandler]:
        return [
            handler
            for event_type in type(event).__mro__
            for handler in self._handlers.get(event_type, [])
        ]

    async def publish(self, event: DomainEvent) -> int:
        """Deliver an event; returns how many handlers completed"""
        delivered = 0
        for handler in self.handlers_for(event):
            try:
                await handler(event)
                delivered += 1
            except Exception:
                logger.exception(f"Handler {getattr(handler, '__name__', handler)} failed on {event.name}")
        logger.debug(f"{event.name} {event.event_id} delivered to {delivered} handler(s)")
        return delivered
