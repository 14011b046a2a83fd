from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.constants import (
    DEFAULT_PERMISSION_LIST_LIMIT,
    MAX_PERMISSION_REASON_LENGTH,
    PERMISSION_APPROVED_NOTE,
)
from ..core.enums import AttendanceStatus, DayOfWeek, RequestStatus
from ..core.exceptions import (
    AuthorizationError,
    NotEnrolled,
    RequestNotFound,
    UnknownCourse,
    ValidationError,
)
from ..courses.repository import CourseRepository
from ..schedules.repository import ScheduleRepository
from .model import ApprovalOutcome, NewPermissionRequest, PermissionFilter, PermissionRequest
from .repository import PermissionRepository

logger = logging.getLogger(__name__)


class PermissionService:
    """Leave requests for a course: submit, review, withdraw.

    Approval marks every scheduled class day of the course inside the
    requested range as ``excused``, signed by the reviewer.
    """

    def __init__(
        self,
        permissions: PermissionRepository,
        courses: CourseRepository,
        schedules: ScheduleRepository,
        attendance: AttendanceService,
    ):
        self._permissions = permissions
        self._courses = courses
        self._schedules = schedules
        self._attendance = attendance

    def request_permission(
        self,
        *,
        person_id: int,
        course_id: int,
        kind: str,
        reason: str,
        start_date: date,
        end_date: date,
        now: datetime | None = None,
    ) -> PermissionRequest:
        kind = require_non_empty(kind, "type")
        reason = require_non_empty(reason, "reason")
        if len(reason) > MAX_PERMISSION_REASON_LENGTH:
            raise ValidationError(f"reason must be at most {MAX_PERMISSION_REASON_LENGTH} characters")
        if end_date < start_date:
            raise ValidationError("end_date must not be before start_date")

        if not self._courses.get_by_id(course_id):
            raise UnknownCourse(f"Course {course_id} does not exist")
        if not self._courses.is_enrolled(course_id=course_id, person_id=person_id):
            raise NotEnrolled(f"Person {person_id} is not enrolled in course {course_id}")

        created = self._permissions.create(
            NewPermissionRequest(
                person_id=int(person_id),
                course_id=int(course_id),
                kind=kind,
                reason=reason,
                start_date=start_date,
                end_date=end_date,
                created_at=now or now_local(),
            )
        )
        logger.info("Permission request %s created by person %s", created.request_id, person_id)
        return created

    def get(self, request_id: int) -> PermissionRequest:
        req = self._permissions.get_by_id(request_id)
        if not req:
            raise RequestNotFound(f"Permission request {request_id} not found")
        return req

    def list_requests(
        self, criteria: PermissionFilter, *, limit: int = DEFAULT_PERMISSION_LIST_LIMIT
    ) -> Sequence[PermissionRequest]:
        return self._permissions.list_requests(criteria, limit=int(limit))

    def class_days(self, req: PermissionRequest) -> list[date]:
        """Days in the requested range on which the course meets."""
        weekdays = {e.day_of_week for e in self._schedules.schedules_for(req.course_id)}
        days = []
        day = req.start_date
        while day <= req.end_date:
            if DayOfWeek.from_weekday(day.weekday()) in weekdays:
                days.append(day)
            day += timedelta(days=1)
        return days

    def _pending(self, request_id: int) -> PermissionRequest:
        req = self.get(request_id)
        if req.status != RequestStatus.PENDING:
            raise ValidationError(f"Permission request {request_id} has already been {req.status.value}")
        return req

    def _decide(
        self,
        req: PermissionRequest,
        status: RequestStatus,
        *,
        reviewer_id: int,
        review_notes: Optional[str],
        now: datetime | None,
    ) -> PermissionRequest:
        decided = self._permissions.decide(
            request_id=req.request_id,
            status=status,
            decided_by=int(reviewer_id),
            decided_at=now or now_local(),
            review_notes=(review_notes or "").strip() or None,
        )
        if not decided:
            raise ValidationError(f"Permission request {req.request_id} has already been reviewed")
        logger.info("Permission request %s %s by reviewer %s", req.request_id, status.value, reviewer_id)
        return self.get(req.request_id)

    def approve(
        self,
        request_id: int,
        *,
        reviewer_id: int,
        review_notes: Optional[str] = None,
        now: datetime | None = None,
    ) -> ApprovalOutcome:
        req = self._pending(request_id)

        note = PERMISSION_APPROVED_NOTE.format(request_id=req.request_id, kind=req.kind, reason=req.reason)
        records = [
            self._attendance.back_fill(
                person_id=req.person_id,
                course_id=req.course_id,
                day=day,
                status=AttendanceStatus.EXCUSED,
                notes=note,
                verified_by=int(reviewer_id),
            )
            for day in self.class_days(req)
        ]

        decided = self._decide(
            req, RequestStatus.APPROVED, reviewer_id=reviewer_id, review_notes=review_notes, now=now
        )
        return ApprovalOutcome(request=decided, excused_records=records)

    def reject(
        self,
        request_id: int,
        *,
        reviewer_id: int,
        review_notes: Optional[str] = None,
        now: datetime | None = None,
    ) -> PermissionRequest:
        req = self._pending(request_id)
        return self._decide(req, RequestStatus.REJECTED, reviewer_id=reviewer_id, review_notes=review_notes, now=now)

    def withdraw(self, request_id: int, *, person_id: int) -> None:
        """Delete one's own request while it is still pending."""
        req = self.get(request_id)
        if req.person_id != int(person_id):
            raise AuthorizationError("Only the requester can withdraw a permission request")
        if req.status != RequestStatus.PENDING or not self._permissions.delete_pending(request_id):
            raise ValidationError("Cannot withdraw a permission request that has been reviewed")
