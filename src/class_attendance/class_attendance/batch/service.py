from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable

from ..attendance.service import AttendanceService
from ..common.datetime_utils import parse_date_like
from ..core.constants import DEFAULT_BATCH_MAX_WORKERS
from ..core.enums import AttendanceStatus, BatchOutcome, SkipReason
from ..core.exceptions import DomainError, StorageUnavailable
from ..courses.model import Course
from ..courses.repository import CourseRepository
from ..people.resolver import PersonResolver
from .model import BatchEntry, BatchEntryResult, BatchResult

logger = logging.getLogger(__name__)


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class BatchReconciler:
    """Apply externally supplied attendance rows one by one.

    A bad row only affects its own result slot; the batch always completes.
    """

    def __init__(
        self,
        attendance: AttendanceService,
        resolver: PersonResolver,
        courses: CourseRepository,
        *,
        max_workers: int = DEFAULT_BATCH_MAX_WORKERS,
    ):
        self._attendance = attendance
        self._resolver = resolver
        self._courses = courses
        self._max_workers = max(1, int(max_workers))

    def reconcile_batch(self, entries: Iterable[BatchEntry | dict]) -> BatchResult:
        items = [e if isinstance(e, BatchEntry) else BatchEntry.from_dict(e) for e in entries]

        if self._max_workers == 1 or len(items) <= 1:
            results = [self._reconcile_one(i, e) for i, e in enumerate(items)]
        else:
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                # map() keeps input order.
                results = list(pool.map(self._reconcile_one, range(len(items)), items))

        result = BatchResult(results=results)
        logger.info("Batch reconciled: %d/%d entries applied", result.success_count, len(results))
        return result

    def _resolve_course(self, ref) -> Course | None:
        if isinstance(ref, bool):
            return None
        if isinstance(ref, int):
            return self._courses.get_by_id(ref)
        token = str(ref).strip()
        if token.isdigit():
            return self._courses.get_by_id(int(token))
        return self._courses.get_by_code(token)

    def _reconcile_one(self, index: int, entry: BatchEntry) -> BatchEntryResult:
        def skipped(reason: SkipReason, message: str) -> BatchEntryResult:
            return BatchEntryResult(index=index, outcome=BatchOutcome.SKIPPED, reason=reason, message=message)

        missing = [name for name in ("person", "course", "date", "status") if _is_blank(getattr(entry, name))]
        if missing:
            return skipped(SkipReason.MISSING_FIELD, f"Missing {', '.join(missing)}")

        try:
            day = parse_date_like(entry.date)
        except ValueError:
            return skipped(SkipReason.INVALID_FIELD, f"Invalid date {entry.date!r}")
        try:
            status = AttendanceStatus(str(entry.status).strip().lower())
        except ValueError:
            return skipped(SkipReason.INVALID_FIELD, f"Invalid status {entry.status!r}")

        try:
            person = self._resolver.resolve(entry.person)
            if not person:
                return skipped(SkipReason.UNKNOWN_PERSON, f"Unknown person {entry.person!r}")

            course = self._resolve_course(entry.course)
            if not course:
                return skipped(SkipReason.UNKNOWN_COURSE, f"Unknown course {entry.course!r}")

            note = None if _is_blank(entry.note) else str(entry.note).strip()
            record = self._attendance.back_fill(
                person_id=person.person_id,
                course_id=course.course_id,
                day=day,
                status=status,
                notes=note,
            )
        except (DomainError, StorageUnavailable) as exc:
            logger.warning("Batch entry %d failed: %s", index, exc)
            return BatchEntryResult(index=index, outcome=BatchOutcome.FAILED, message=str(exc))
        except Exception as exc:
            logger.exception("Batch entry %d failed unexpectedly", index)
            return BatchEntryResult(index=index, outcome=BatchOutcome.FAILED, message=str(exc) or type(exc).__name__)

        return BatchEntryResult(index=index, outcome=BatchOutcome.SUCCESS, record=record)
