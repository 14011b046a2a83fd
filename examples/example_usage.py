"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; the check-in and reporting rules live in services.
"""

import importlib
from datetime import date

from class_attendance.attendance.model import AttendanceFilter
from class_attendance.config import get_settings_module
from class_attendance.container import build_container
from class_attendance.core.enums import GroupBy


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)

    result = container.batch_reconciler.reconcile_batch(
        [
            {"person": "S100", "course": "CS101", "date": "2024-09-02", "status": "present"},
            {"person": "S101", "course": "CS101", "date": "2024-09-02", "status": "excused", "note": "Medical"},
        ]
    )
    print("imported:", result.success_count)

    criteria = AttendanceFilter(course_id=1, start_date=date(2024, 9, 1), end_date=date(2024, 9, 30))
    print(container.report_service.summary(criteria))
    for bucket in container.report_service.trend(criteria, GroupBy.WEEKLY):
        print(bucket.key, bucket.total, {s.value: p for s, p in bucket.percentages.items()})


if __name__ == "__main__":
    main()
