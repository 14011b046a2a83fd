from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Person:
    """Domain entity: a person known to the identity subsystem (read-only here)."""

    person_id: int
    full_name: str
    external_code: Optional[str] = None
