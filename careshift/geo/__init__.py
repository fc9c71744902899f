"""
Geofencing: haversine distance, zone membership and position acquisition
"""

from careshift.geo.distance import distance_meters
from careshift.geo.geofence import GeofenceEvaluator, GeofenceTracker, LiveCoordinate, Zone

__all__ = [
    "distance_meters",
    "GeofenceEvaluator",
    "GeofenceTracker",
    "LiveCoordinate",
    "Zone",
]
