from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..core.enums import ClassTiming
from ..geo.distance import Coordinate


@dataclass(frozen=True)
class NearbyClass:
    course_id: int
    code: str
    name: str
    start_time: time
    end_time: time
    location: Coordinate
    distance_meters: float
    timing: ClassTiming
