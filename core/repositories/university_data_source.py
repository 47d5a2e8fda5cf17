from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from core.domain.entities.course_entity import CourseSummaryEntity
from core.domain.entities.university_entity import UniversityEntity, UniversitySummaryEntity


class UniversityDataSource(ABC):
    """
    Abstraction over the upstream education statistics API.

    Every method raises UpstreamUnavailable when the upstream cannot be reached
    or answers with something that cannot be parsed.
    """

    @abstractmethod
    async def fetch_university_list(self) -> List[UniversitySummaryEntity]: ...

    @abstractmethod
    async def fetch_university(self, pubukprn: str) -> UniversityEntity: ...

    @abstractmethod
    async def fetch_courses(self, pubukprn: str) -> List[CourseSummaryEntity]: ...

    @abstractmethod
    async def fetch_course_detail(self, pubukprn: str, kiscourseid: str, mode: str) -> Dict[str, Any]:
        """
        Raw course record; the caller derives the exposed fields.
        """
        raise NotImplementedError
