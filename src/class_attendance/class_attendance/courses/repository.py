from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Course


class CourseRepository(Protocol):
    def get_by_id(self, course_id: int) -> Optional[Course]:
        raise NotImplementedError

    def get_by_code(self, code: str) -> Optional[Course]:
        raise NotImplementedError

    def is_enrolled(self, *, course_id: int, person_id: int) -> bool:
        raise NotImplementedError

    def enrolled_person_ids(self, course_id: int) -> Sequence[int]:
        raise NotImplementedError

    def courses_for_person(self, person_id: int) -> Sequence[Course]:
        raise NotImplementedError
