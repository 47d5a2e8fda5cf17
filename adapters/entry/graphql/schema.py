"""UniNinja GraphQL schema (Strawberry)."""

from __future__ import annotations

from typing import List, Optional

import strawberry
from strawberry.scalars import JSON
from strawberry.types import Info

from adapters.entry.graphql.context import SCOPE_STATE_KEY
from core.domain.entities.course_entity import CourseEntity, CourseSummaryEntity
from core.domain.entities.university_entity import UniversityEntity, UniversitySummaryEntity
from core.usecases.university_catalog_use_case import UniversityCatalogUseCase


def _catalog(info: Info) -> UniversityCatalogUseCase:
    return info.context[SCOPE_STATE_KEY].catalog


@strawberry.type
class Course:
    kiscourseid: Optional[strawberry.ID] = None
    title: Optional[str] = None
    is_full_time: Optional[str] = None
    course_url: Optional[str] = strawberry.field(name="courseURL", default=None)
    years: Optional[int] = None
    placement_year_avaliable: Optional[bool] = None
    year_abroad_avaliable: Optional[bool] = None
    degree_label: Optional[str] = None
    is_hons: Optional[JSON] = None

    @classmethod
    def from_summary(cls, ent: CourseSummaryEntity) -> Course:
        return cls(
            kiscourseid=strawberry.ID(ent.kiscourseid),
            title=ent.title,
            is_full_time=ent.is_full_time,
        )

    @classmethod
    def from_entity(cls, ent: CourseEntity) -> Course:
        return cls(
            kiscourseid=strawberry.ID(ent.kiscourseid),
            title=ent.title,
            is_full_time=ent.is_full_time,
            course_url=ent.course_url,
            years=ent.years,
            placement_year_avaliable=ent.placement_year_avaliable,
            year_abroad_avaliable=ent.year_abroad_avaliable,
            degree_label=ent.degree_label,
            is_hons=ent.is_hons,
        )


@strawberry.type
class University:
    pubukprn: strawberry.ID
    name: Optional[str] = None
    union_url: Optional[str] = strawberry.field(name="unionURL", default=None)
    url: Optional[str] = None
    color: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    average_rent: Optional[float] = None
    uni_location_type: Optional[str] = None
    uni_type: Optional[str] = None
    nearest_train_station: Optional[str] = None

    @strawberry.field
    async def courses(self, info: Info) -> Optional[List[Course]]:
        """Courses of this university, fetched only when selected."""
        items = await _catalog(info).list_courses(str(self.pubukprn))
        return [Course.from_summary(c) for c in items]

    @classmethod
    def from_summary(cls, ent: UniversitySummaryEntity) -> University:
        return cls(pubukprn=strawberry.ID(ent.pubukprn), name=ent.name)

    @classmethod
    def from_entity(cls, ent: UniversityEntity) -> University:
        return cls(
            pubukprn=strawberry.ID(ent.pubukprn),
            name=ent.name,
            union_url=ent.union_url,
            url=ent.url,
            color=ent.color,
            lat=ent.lat,
            lon=ent.lon,
            average_rent=ent.average_rent,
            uni_location_type=ent.uni_location_type,
            uni_type=ent.uni_type,
            nearest_train_station=ent.nearest_train_station,
        )


@strawberry.type
class Query:
    @strawberry.field
    async def university(self, info: Info, pubukprn: Optional[strawberry.ID] = None) -> Optional[University]:
        ent = await _catalog(info).get_university(pubukprn)
        return University.from_entity(ent)

    @strawberry.field
    async def universities(self, info: Info) -> Optional[List[University]]:
        items = await _catalog(info).list_universities()
        return [University.from_summary(u) for u in items]

    @strawberry.field
    async def course_list(self, info: Info, pubukprn: Optional[strawberry.ID] = None) -> Optional[List[Course]]:
        items = await _catalog(info).list_courses(pubukprn)
        return [Course.from_summary(c) for c in items]

    @strawberry.field
    async def course(
        self,
        info: Info,
        pubukprn: Optional[strawberry.ID] = None,
        kiscourseid: Optional[strawberry.ID] = None,
        is_full_time: Optional[str] = None,
    ) -> Optional[Course]:
        ent = await _catalog(info).get_course(pubukprn, kiscourseid, is_full_time)
        return Course.from_entity(ent)


schema = strawberry.Schema(query=Query)
