from __future__ import annotations

from dataclasses import dataclass

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .batch.service import BatchReconciler
from .core.constants import (
    DEFAULT_BATCH_MAX_WORKERS,
    DEFAULT_EARLY_ADMISSION_MINUTES,
    DEFAULT_GEOFENCE_RADIUS_METERS,
    DEFAULT_LATE_THRESHOLD_MINUTES,
    DEFAULT_UPSERT_MAX_RETRIES,
)
from .courses.mysql_course_repository import MySQLCourseRepository
from .courses.repository import CourseRepository
from .database.connection import DBConfig, DatabaseConnection
from .geo.geofence import GeofenceVerifier
from .locations.service import NearbyClassFinder
from .people.mysql_person_repository import MySQLPersonRepository
from .people.repository import PersonRepository
from .people.resolver import PersonResolver
from .permissions.mysql_permission_repository import MySQLPermissionRepository
from .permissions.repository import PermissionRepository
from .permissions.service import PermissionService
from .reports.service import ReportService
from .schedules.eligibility import ScheduleEligibilityResolver
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.repository import ScheduleRepository


@dataclass(frozen=True)
class Container:
    attendance_repo: AttendanceRepository
    schedules_repo: ScheduleRepository
    people_repo: PersonRepository
    courses_repo: CourseRepository
    permissions_repo: PermissionRepository

    attendance_service: AttendanceService
    batch_reconciler: BatchReconciler
    report_service: ReportService
    permission_service: PermissionService
    nearby_class_finder: NearbyClassFinder


def build_services(
    *,
    attendance_repo: AttendanceRepository,
    schedules_repo: ScheduleRepository,
    people_repo: PersonRepository,
    courses_repo: CourseRepository,
    permissions_repo: PermissionRepository,
    settings: object | None = None,
) -> Container:
    """Wire services on top of any repository implementations."""

    def setting(name: str, default):
        return getattr(settings, name, default) if settings is not None else default

    attendance_service = AttendanceService(
        attendance_repo,
        schedules_repo,
        people_repo,
        courses_repo,
        eligibility=ScheduleEligibilityResolver(
            early_admission_minutes=setting("EARLY_ADMISSION_MINUTES", DEFAULT_EARLY_ADMISSION_MINUTES),
            late_threshold_minutes=setting("LATE_THRESHOLD_MINUTES", DEFAULT_LATE_THRESHOLD_MINUTES),
        ),
        geofence=GeofenceVerifier(setting("GEOFENCE_RADIUS_METERS", DEFAULT_GEOFENCE_RADIUS_METERS)),
        strategy_factory=AttendanceStrategyFactory(),
        max_retries=setting("UPSERT_MAX_RETRIES", DEFAULT_UPSERT_MAX_RETRIES),
    )
    batch_reconciler = BatchReconciler(
        attendance_service,
        PersonResolver(people_repo),
        courses_repo,
        max_workers=setting("BATCH_MAX_WORKERS", DEFAULT_BATCH_MAX_WORKERS),
    )
    report_service = ReportService(attendance_repo, people=people_repo, courses=courses_repo)
    permission_service = PermissionService(permissions_repo, courses_repo, schedules_repo, attendance_service)
    nearby_class_finder = NearbyClassFinder(courses_repo, schedules_repo)

    return Container(
        attendance_repo=attendance_repo,
        schedules_repo=schedules_repo,
        people_repo=people_repo,
        courses_repo=courses_repo,
        permissions_repo=permissions_repo,
        attendance_service=attendance_service,
        batch_reconciler=batch_reconciler,
        report_service=report_service,
        permission_service=permission_service,
        nearby_class_finder=nearby_class_finder,
    )


def build_container(*, db_config: dict, settings: object | None = None) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    return build_services(
        attendance_repo=MySQLAttendanceRepository(conn),
        schedules_repo=MySQLScheduleRepository(conn),
        people_repo=MySQLPersonRepository(conn),
        courses_repo=MySQLCourseRepository(conn),
        permissions_repo=MySQLPermissionRepository(conn),
        settings=settings,
    )
