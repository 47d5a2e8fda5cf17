from __future__ import annotations

import logging
from typing import List, Optional

from core.domain.entities.course_entity import CourseEntity, CourseSummaryEntity
from core.domain.entities.university_entity import UniversityEntity, UniversitySummaryEntity
from core.domain.errors import ResolutionIncomplete
from core.repositories.university_data_source import UniversityDataSource
from core.repositories.university_supplement_repository import UniversitySupplementRepository
from core.services.course_derivation_service import CourseDerivationService


class UniversityCatalogUseCase:
    """
    Resolves the catalog queries by combining Unistats with the MongoDB supplements.

    Only `get_university` touches the store; list endpoints return Unistats data
    verbatim so a listing never costs one store lookup per institution.
    """

    def __init__(
        self,
        *,
        data_source: UniversityDataSource,
        supplements: UniversitySupplementRepository,
        logger: logging.Logger | None = None,
    ) -> None:
        self._data_source = data_source
        self._supplements = supplements
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    async def get_university(self, pubukprn: str) -> UniversityEntity:
        """
        Fetch one university and merge its supplement, if any.

        The supplement is looked up with the identifier Unistats returned. A
        malformed supplement never fails the query: unusable values are left out,
        and an unusable document is ignored.
        """
        university = await self._data_source.fetch_university(_required("pubukprn", pubukprn))
        try:
            supplement = await self._supplements.find_university_supplement(university.pubukprn)
        except ResolutionIncomplete as exc:
            self._logger.warning("Ignoring supplement pubukprn=%s: %s", university.pubukprn, exc)
            supplement = None

        if supplement is None:
            self._logger.debug("No supplement for pubukprn=%s", university.pubukprn)
        elif supplement.rejected_fields:
            self._logger.warning(
                "Omitting invalid supplement fields pubukprn=%s: %s",
                university.pubukprn,
                ", ".join(supplement.rejected_fields),
            )
        return university.with_supplement(supplement)

    async def list_universities(self) -> List[UniversitySummaryEntity]:
        return await self._data_source.fetch_university_list()

    async def list_courses(self, pubukprn: str) -> List[CourseSummaryEntity]:
        return await self._data_source.fetch_courses(_required("pubukprn", pubukprn))

    async def get_course(self, pubukprn: str, kiscourseid: str, mode: str) -> CourseEntity:
        """
        Fetch a course detail and derive the placement/abroad flags and length.
        """
        pubukprn = _required("pubukprn", pubukprn)
        kiscourseid = _required("kiscourseid", kiscourseid)
        mode = _required("isFullTime", mode)

        raw = await self._data_source.fetch_course_detail(pubukprn, kiscourseid, mode)

        years: Optional[int] = None
        try:
            years = CourseDerivationService.parse_years(raw.get("LengthInYears"))
        except ResolutionIncomplete as exc:
            self._logger.warning(
                "Omitting course length pubukprn=%s kiscourseid=%s: %s",
                pubukprn,
                kiscourseid,
                exc,
            )

        return CourseDerivationService.build(raw, kiscourseid=kiscourseid, mode=mode, years=years)


def _required(name: str, value: Optional[str]) -> str:
    value = str(value).strip() if value is not None else ""
    if not value:
        raise ValueError(f"{name} is required")
    return value
