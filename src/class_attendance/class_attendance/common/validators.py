from __future__ import annotations

from ..core.exceptions import ValidationError
from ..geo.distance import Coordinate


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_positive_id(value, field_name: str) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer") from None
    if parsed <= 0:
        raise ValidationError(f"{field_name} must be positive")
    return parsed


def require_coordinate(lat, lon) -> Coordinate:
    try:
        lat_f = float(lat)
        lon_f = float(lon)
    except (TypeError, ValueError):
        raise ValidationError("Coordinates must be numbers") from None

    if not -90.0 <= lat_f <= 90.0:
        raise ValidationError("Latitude must be between -90 and 90")
    if not -180.0 <= lon_f <= 180.0:
        raise ValidationError("Longitude must be between -180 and 180")
    return Coordinate(lat=lat_f, lon=lon_f)
