from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Course:
    course_id: int
    code: str
    name: str
