"""
Geofence evaluation

A GeofenceEvaluator is a two-state machine (OUTSIDE, INSIDE) that starts
OUTSIDE and emits an event only when the state flips. Repeated evaluations
in a steady state emit nothing.
"""

from typing import Dict, Optional, Tuple
import uuid

from pydantic import BaseModel, Field
import structlog

from careshift.core.events import GeofenceTransition, GeofenceTransitionType
from careshift.geo.distance import distance_meters
from careshift.models.location import Location

logger = structlog.get_logger(__name__)


class LiveCoordinate(BaseModel):
    """Position reported by a device (or the simulator)"""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    accuracy: Optional[float] = Field(default=None, ge=0, description="Meters")


class Zone(BaseModel):
    """Circular work zone"""
    id: Optional[uuid.UUID] = None
    name: str
    latitude: float
    longitude: float
    radius: float = Field(..., gt=0, description="Radius in kilometers")

    @classmethod
    def from_location(cls, location: Location) -> "Zone":
        return cls(
            id=location.id,
            name=location.name,
            latitude=location.latitude,
            longitude=location.longitude,
            radius=location.radius,
        )

    def distance_to(self, coordinate: LiveCoordinate) -> float:
        return distance_meters(
            coordinate.latitude, coordinate.longitude, self.latitude, self.longitude
        )


class GeofenceEvaluator:
    """Edge-triggered inside/outside tracking for one zone"""

    def __init__(self, display_seconds: int = 5):
        self.display_seconds = display_seconds
        self.previous_inside = False
        self.last_distance: Optional[float] = None

    def evaluate(
        self,
        coordinate: Optional[LiveCoordinate],
        zone: Optional[Zone],
        user_id: Optional[uuid.UUID] = None,
    ) -> Optional[GeofenceTransition]:
        """Evaluate a position; return a transition event only on a state change"""
        if coordinate is None or zone is None:
            return None

        distance = zone.distance_to(coordinate)
        inside_now = distance <= zone.radius * 1000
        self.last_distance = distance

        if inside_now == self.previous_inside:
            return None

        self.previous_inside = inside_now
        transition = (
            GeofenceTransitionType.ENTERED if inside_now else GeofenceTransitionType.EXITED
        )
        logger.debug(
            f"Geofence {transition.value.lower()}: {zone.name} "
            f"at {distance:.0f}m (radius {zone.radius}km)"
        )
        return GeofenceTransition(
            transition=transition,
            zone_name=zone.name,
            radius_km=zone.radius,
            distance_meters=distance,
            display_seconds=self.display_seconds,
            zone_id=zone.id,
            user_id=user_id,
        )

    @property
    def inside(self) -> bool:
        return self.previous_inside


class GeofenceTracker:
    """Keeps one evaluator per (user, zone) across polling requests

    Created once at startup. A zone the user has not been evaluated against
    before starts OUTSIDE.
    """

    def __init__(self, display_seconds: int = 5):
        self.display_seconds = display_seconds
        self._evaluators: Dict[Tuple[uuid.UUID, Optional[uuid.UUID]], GeofenceEvaluator] = {}

    def evaluator_for(self, user_id: uuid.UUID, zone: Zone) -> GeofenceEvaluator:
        key = (user_id, zone.id)
        if key not in self._evaluators:
            self._evaluators[key] = GeofenceEvaluator(display_seconds=self.display_seconds)
        return self._evaluators[key]

    def evaluate(
        self,
        user_id: uuid.UUID,
        coordinate: Optional[LiveCoordinate],
        zone: Optional[Zone],
    ) -> Optional[GeofenceTransition]:
        if coordinate is None or zone is None:
            return None
        return self.evaluator_for(user_id, zone).evaluate(coordinate, zone, user_id=user_id)

    def reset(self, user_id: uuid.UUID) -> None:
        """Forget all zone state for a user"""
        for key in [k for k in self._evaluators if k[0] == user_id]:
            del self._evaluators[key]
