from __future__ import annotations

from flask import Flask, jsonify, request

from ..attendance.controller import record_to_json
from ..common.datetime_utils import parse_iso_date
from ..common.http import current_person_id, json_body
from ..common.validators import require_positive_id
from ..container import Container
from ..core.enums import RequestStatus
from ..core.exceptions import ValidationError
from .model import PermissionFilter, PermissionRequest


def request_to_json(r: PermissionRequest) -> dict:
    return {
        "id": r.request_id,
        "person_id": r.person_id,
        "course_id": r.course_id,
        "type": r.kind,
        "reason": r.reason,
        "start_date": r.start_date.isoformat(),
        "end_date": r.end_date.isoformat(),
        "status": r.status.value,
        "created_at": r.created_at.isoformat(),
        "reviewed_by": r.decided_by,
        "reviewed_at": r.decided_at.isoformat() if r.decided_at else None,
        "review_notes": r.review_notes,
    }


def _date_field(data: dict, *names: str):
    raw = next((data.get(n) for n in names if data.get(n)), None)
    if not raw:
        raise ValidationError(f"{names[0]} is required")
    try:
        return parse_iso_date(str(raw)[:10])
    except ValueError:
        raise ValidationError(f"{names[0]} must be YYYY-MM-DD") from None


def register(app: Flask, container: Container) -> None:
    service = container.permission_service

    @app.route("/api/permissions", methods=["POST"], endpoint="permissions_create")
    def create():
        data = json_body()
        created = service.request_permission(
            person_id=current_person_id(),
            course_id=require_positive_id(data.get("course_id"), "course_id"),
            kind=data.get("type") or "",
            reason=data.get("reason") or "",
            # A single "date" means a one-day request.
            start_date=_date_field(data, "start_date", "date"),
            end_date=_date_field(data, "end_date", "date"),
        )
        return jsonify({"success": True, "permission": request_to_json(created)}), 201

    @app.route("/api/permissions", methods=["GET"], endpoint="permissions_list")
    def list_requests():
        current_person_id()
        status = request.args.get("status")
        course = request.args.get("course_id")
        person = request.args.get("person_id")
        try:
            criteria = PermissionFilter(
                status=RequestStatus(status) if status else None,
                course_id=require_positive_id(course, "course_id") if course else None,
                person_id=require_positive_id(person, "person_id") if person else None,
            )
        except ValueError:
            raise ValidationError("status must be pending, approved or rejected") from None
        return jsonify([request_to_json(r) for r in service.list_requests(criteria)])

    @app.route("/api/permissions/mine", methods=["GET"], endpoint="permissions_mine")
    def mine():
        rows = service.list_requests(PermissionFilter(person_id=current_person_id()))
        return jsonify([request_to_json(r) for r in rows])

    @app.route("/api/permissions/<int:request_id>", methods=["GET"], endpoint="permissions_get")
    def get(request_id: int):
        current_person_id()
        return jsonify(request_to_json(service.get(request_id)))

    @app.route("/api/permissions/<int:request_id>", methods=["PUT"], endpoint="permissions_review")
    def review(request_id: int):
        data = json_body()
        reviewer_id = current_person_id()
        decision = str(data.get("status", "")).lower()
        notes = data.get("review_notes")

        if decision == RequestStatus.APPROVED.value:
            outcome = service.approve(request_id, reviewer_id=reviewer_id, review_notes=notes)
            return jsonify(
                {
                    "success": True,
                    "permission": request_to_json(outcome.request),
                    "excused": [record_to_json(r) for r in outcome.excused_records],
                }
            )
        if decision == RequestStatus.REJECTED.value:
            rejected = service.reject(request_id, reviewer_id=reviewer_id, review_notes=notes)
            return jsonify({"success": True, "permission": request_to_json(rejected)})
        raise ValidationError("status must be approved or rejected")

    @app.route("/api/permissions/<int:request_id>", methods=["DELETE"], endpoint="permissions_withdraw")
    def withdraw(request_id: int):
        service.withdraw(request_id, person_id=current_person_id())
        return jsonify({"success": True})
