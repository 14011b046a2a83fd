"""Shared helpers for the JSON controllers."""

from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, jsonify, request

from ..attendance.model import AttendanceFilter
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    IneligibleWindow,
    NoCheckInFound,
    NotEnrolled,
    RecordNotFound,
    RequestNotFound,
    StorageUnavailable,
    UnknownCourse,
    UnknownPerson,
    ValidationError,
)
from .datetime_utils import parse_iso_date
from .validators import require_positive_id

logger = logging.getLogger(__name__)

PERSON_HEADER = "X-Person-Id"

_STATUS_CODES: dict[type, int] = {
    ValidationError: 400,
    IneligibleWindow: 400,
    AuthenticationError: 401,
    NotEnrolled: 403,
    AuthorizationError: 403,
    NoCheckInFound: 404,
    RecordNotFound: 404,
    RequestNotFound: 404,
    UnknownPerson: 404,
    UnknownCourse: 404,
}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(exc: DomainError):
        code = next((c for t, c in _STATUS_CODES.items() if isinstance(exc, t)), 400)
        return jsonify({"success": False, "error": type(exc).__name__, "message": str(exc)}), code

    @app.errorhandler(StorageUnavailable)
    def handle_storage_unavailable(exc: StorageUnavailable):
        logger.error("Storage unavailable: %s", exc)
        return jsonify({"success": False, "error": "StorageUnavailable", "message": "Please retry", "retryable": True}), 503


def current_person_id() -> int:
    """Caller identity, set by the upstream authentication gateway."""
    raw = request.headers.get(PERSON_HEADER)
    if not raw:
        raise AuthenticationError("Missing caller identity")
    return require_positive_id(raw, PERSON_HEADER)


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _optional_int(name: str) -> Optional[int]:
    value = request.args.get(name)
    return require_positive_id(value, name) if value else None


def filter_from_query() -> AttendanceFilter:
    status = request.args.get("status")
    start = request.args.get("start_date")
    end = request.args.get("end_date")
    try:
        return AttendanceFilter(
            course_id=_optional_int("course_id"),
            person_id=_optional_int("person_id"),
            status=AttendanceStatus(status) if status else None,
            start_date=parse_iso_date(start) if start else None,
            end_date=parse_iso_date(end) if end else None,
        )
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc


def status_map(values: dict[AttendanceStatus, int]) -> dict[str, int]:
    return {s.value: int(v) for s, v in values.items()}
