from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ...core.constants import GEOFENCE_FAILED_NOTE
from ...core.enums import AttendanceStatus, VerificationMethod
from ...geo.geofence import GeofenceResult


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    verification_method: VerificationMethod
    note: str = ""


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide a check-in's status.

    The geofence never changes the status; a failed geofence only demotes the
    verification method to manual and leaves a note for the reviewer.
    """

    @abstractmethod
    def status(self) -> AttendanceStatus:
        raise NotImplementedError

    def decide_checkin(self, *, geofence: GeofenceResult) -> StatusDecision:
        if geofence.within_radius:
            return StatusDecision(status=self.status(), verification_method=VerificationMethod.GEOLOCATION)
        return StatusDecision(
            status=self.status(),
            verification_method=VerificationMethod.MANUAL,
            note=GEOFENCE_FAILED_NOTE.format(distance=round(geofence.distance_meters)),
        )
