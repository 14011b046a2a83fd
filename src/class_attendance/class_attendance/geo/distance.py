"""Great-circle distance between two coordinates.

Range checking of latitude/longitude is left to callers
(see ``common.validators.require_coordinate``).
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from ..core.constants import EARTH_RADIUS_METERS


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lon: float


def haversine_distance(a: Coordinate, b: Coordinate) -> float:
    """Distance in meters between ``a`` and ``b`` using the haversine formula."""
    phi1 = math.radians(a.lat)
    phi2 = math.radians(b.lat)
    dphi = math.radians(b.lat - a.lat)
    dlambda = math.radians(b.lon - a.lon)

    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    # Rounding can push h just past 1 for near-antipodal points.
    h = min(1.0, max(0.0, h))
    return EARTH_RADIUS_METERS * 2 * math.asin(math.sqrt(h))
