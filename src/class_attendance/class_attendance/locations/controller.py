from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_person_id
from ..common.validators import require_coordinate
from ..container import Container
from ..core.constants import DEFAULT_NEARBY_MAX_DISTANCE_METERS
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    finder = container.nearby_class_finder

    @app.route("/api/locations/nearby-classes", methods=["GET"], endpoint="locations_nearby_classes")
    def nearby_classes():
        lat = request.args.get("lat")
        lon = request.args.get("lon")
        if lat is None or lon is None:
            raise ValidationError("Location coordinates are required")
        point = require_coordinate(lat, lon)
        try:
            max_distance = float(request.args.get("max_distance", DEFAULT_NEARBY_MAX_DISTANCE_METERS))
        except ValueError:
            raise ValidationError("max_distance must be a number") from None

        rows = finder.nearby_classes(current_person_id(), point, max_distance=max_distance)
        return jsonify(
            [
                {
                    "course_id": c.course_id,
                    "code": c.code,
                    "name": c.name,
                    "start_time": c.start_time.strftime("%H:%M"),
                    "end_time": c.end_time.strftime("%H:%M"),
                    "distance": round(c.distance_meters),
                    "status": c.timing.value,
                    "location": {"lat": c.location.lat, "lon": c.location.lon},
                }
                for c in rows
            ]
        )
