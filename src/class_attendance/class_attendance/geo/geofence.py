from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import DEFAULT_GEOFENCE_RADIUS_METERS
from .distance import Coordinate, haversine_distance


@dataclass(frozen=True)
class GeofenceResult:
    within_radius: bool
    distance_meters: float


class GeofenceVerifier:
    """Classify a reported position against a fixed class location."""

    def __init__(self, radius_meters: float = DEFAULT_GEOFENCE_RADIUS_METERS):
        self._radius = float(radius_meters)

    @property
    def radius_meters(self) -> float:
        return self._radius

    def verify(self, reported: Coordinate, expected: Coordinate) -> GeofenceResult:
        distance = haversine_distance(reported, expected)
        # Boundary is inclusive.
        return GeofenceResult(within_radius=distance <= self._radius, distance_meters=distance)
