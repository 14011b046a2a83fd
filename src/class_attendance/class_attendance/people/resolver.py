"""Resolve person references coming from external batch files.

A reference may be an external code (e.g. ``"S100"`` or a purely numeric
student number) or an internal numeric id. Upstream callers cannot always
tell which one they hold, so a string is tried as an external code first and
only falls back to the internal id when it is all digits and no code matched.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from .model import Person
from .repository import PersonRepository

logger = logging.getLogger(__name__)

PersonRef = Union[int, str]


class PersonResolver:
    def __init__(self, people: PersonRepository):
        self._people = people

    def resolve(self, ref: PersonRef) -> Optional[Person]:
        if isinstance(ref, bool):
            return None
        if isinstance(ref, int):
            return self._people.get_by_id(ref)

        token = str(ref).strip()
        if not token:
            return None

        person = self._people.get_by_external_code(token)
        if person:
            return person

        if token.isdigit():
            person = self._people.get_by_id(int(token))
            if person:
                logger.debug("Person reference %r resolved as internal id", token)
            return person
        return None
