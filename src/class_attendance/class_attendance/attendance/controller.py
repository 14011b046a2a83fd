from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import current_person_id, json_body
from ..common.validators import require_coordinate, require_positive_id
from ..container import Container
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from .model import AttendanceRecord


def record_to_json(r: AttendanceRecord) -> dict:
    return {
        "id": r.attendance_id,
        "person_id": r.person_id,
        "course_id": r.course_id,
        "date": r.calendar_day.isoformat(),
        "status": r.status.value,
        "check_in_time": r.check_in_time.isoformat() if r.check_in_time else None,
        "check_out_time": r.check_out_time.isoformat() if r.check_out_time else None,
        "location": {"lat": r.reported_location.lat, "lon": r.reported_location.lon} if r.reported_location else None,
        "verification_method": r.verification_method.value,
        "distance_meters": round(r.distance_meters) if r.distance_meters is not None else None,
        "notes": r.notes,
        "verified_by": r.verified_by,
    }


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    def check_in():
        data = json_body()
        course_id = require_positive_id(data.get("course_id"), "course_id")
        location = data.get("location")
        if not isinstance(location, dict):
            raise ValidationError("location is required")
        point = require_coordinate(location.get("lat"), location.get("lon"))

        outcome = service.check_in(current_person_id(), course_id, location=point)
        return jsonify(
            {
                "success": True,
                "attendance": record_to_json(outcome.record),
                "location_verified": outcome.within_radius,
                "distance": round(outcome.distance_meters),
            }
        )

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    def check_out():
        data = json_body()
        course_id = require_positive_id(data.get("course_id"), "course_id")
        record = service.check_out(current_person_id(), course_id)
        return jsonify({"success": True, "attendance": record_to_json(record)})

    @app.route("/api/attendance/<int:attendance_id>", methods=["PUT"], endpoint="attendance_correct")
    def correct(attendance_id: int):
        data = json_body()
        try:
            status = AttendanceStatus(str(data.get("status", "")).lower())
        except ValueError:
            raise ValidationError("status must be one of present, late, absent, excused") from None

        record = service.manual_correction(
            attendance_id,
            reviewer_id=current_person_id(),
            status=status,
            notes=data.get("notes"),
        )
        return jsonify({"success": True, "attendance": record_to_json(record)})

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    def history():
        course = request.args.get("course_id")
        course_id = require_positive_id(course, "course_id") if course else None
        rows = service.history(current_person_id(), course_id=course_id)
        return jsonify([record_to_json(r) for r in rows])

    @app.route("/api/attendance/course/<int:course_id>/<day>", methods=["GET"], endpoint="attendance_roster")
    def roster(course_id: int, day: str):
        try:
            work_day = parse_iso_date(day)
        except ValueError:
            raise ValidationError("date must be YYYY-MM-DD") from None

        rows = service.course_roster(course_id, work_day)
        return jsonify(
            [
                {
                    "person_id": r.person_id,
                    "name": r.full_name,
                    "external_code": r.external_code,
                    "status": r.status.value,
                    "note": r.notes,
                    "attendance_id": r.attendance_id,
                }
                for r in rows
            ]
        )
