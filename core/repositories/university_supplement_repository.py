from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from core.domain.entities.university_supplement_entity import UniversitySupplementEntity


class UniversitySupplementRepository(ABC):
    """
    Abstraction for reading hand-curated university fields from a storage.
    """

    @abstractmethod
    async def ensure_indexes(self) -> None: ...

    @abstractmethod
    async def find_university_supplement(self, pubukprn: str) -> Optional[UniversitySupplementEntity]:
        """
        Retrieve the supplement for an institution, or None when there is none.

        Zero matches is not an error; storage failures must propagate.
        """
        raise NotImplementedError
