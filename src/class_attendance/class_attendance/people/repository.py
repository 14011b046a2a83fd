from __future__ import annotations

from typing import Optional, Protocol

from .model import Person


class PersonRepository(Protocol):
    """Person resolver.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, person_id: int) -> Optional[Person]:
        raise NotImplementedError

    def get_by_external_code(self, code: str) -> Optional[Person]:
        raise NotImplementedError
