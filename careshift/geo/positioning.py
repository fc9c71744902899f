"""
Position acquisition

A device position is requested once with a bounded wait. On timeout, or when
the source reports the position unavailable, the configured default
coordinate is used instead, so acquisition never blocks indefinitely.
"""

import asyncio
from typing import Awaitable, Callable, Dict, List, Optional
import uuid

import structlog

from careshift.geo.geofence import LiveCoordinate

logger = structlog.get_logger(__name__)

PositionSource = Callable[[], Awaitable[LiveCoordinate]]

# Preset route around the default site: alternates inside/outside a 3km zone
SIMULATED_COORDINATES: List[LiveCoordinate] = [
    LiveCoordinate(latitude=40.7901, longitude=-73.9533, accuracy=10),  # inside
    LiveCoordinate(latitude=40.8201, longitude=-73.9833, accuracy=10),  # outside
    LiveCoordinate(latitude=40.8001, longitude=-73.9633, accuracy=10),  # inside
    LiveCoordinate(latitude=40.8501, longitude=-74.0033, accuracy=10),  # outside
]


class PositionUnavailable(Exception):
    """The source could not produce a position (denied, no fix)"""


class SimulatedRoute:
    """Cycles through a fixed list of coordinates, one per step"""

    def __init__(self, coordinates: Optional[List[LiveCoordinate]] = None):
        self.coordinates = list(SIMULATED_COORDINATES if coordinates is None else coordinates)
        if not self.coordinates:
            raise ValueError("Simulated route needs at least one coordinate")
        self.index: Optional[int] = None

    async def next_position(self) -> LiveCoordinate:
        self.index = 0 if self.index is None else (self.index + 1) % len(self.coordinates)
        return self.coordinates[self.index]


class SimulatedRoutes:
    """One route per user; a route is dropped when the user clocks out"""

    def __init__(self, coordinates: Optional[List[LiveCoordinate]] = None):
        self.coordinates = coordinates
        self._routes: Dict[uuid.UUID, SimulatedRoute] = {}

    def route_for(self, user_id: uuid.UUID) -> SimulatedRoute:
        if user_id not in self._routes:
            self._routes[user_id] = SimulatedRoute(self.coordinates)
        return self._routes[user_id]

    def discard(self, user_id: uuid.UUID) -> None:
        self._routes.pop(user_id, None)

    def __len__(self) -> int:
        return len(self._routes)


async def acquire_position(
    source: PositionSource,
    timeout: float,
    fallback: LiveCoordinate,
) -> LiveCoordinate:
    """One-shot position request bounded by timeout, with a fallback coordinate"""
    try:
        return await asyncio.wait_for(source(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Position request timed out after {timeout}s, using default")
    except PositionUnavailable as e:
        logger.warning(f"Position unavailable ({e}), using default")
    return fallback
