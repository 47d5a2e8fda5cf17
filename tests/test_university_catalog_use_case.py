"""
Tests for the catalog resolution flow (Unistats + MongoDB supplements).
"""

from __future__ import annotations

import pytest

from core.domain.entities.university_entity import UniversityEntity
from core.domain.errors import UpstreamUnavailable
from core.usecases.university_catalog_use_case import UniversityCatalogUseCase


@pytest.fixture
def catalog(data_source, supplements) -> UniversityCatalogUseCase:
    return UniversityCatalogUseCase(data_source=data_source, supplements=supplements)


class TestGetUniversity:
    async def test_without_supplement_keeps_only_upstream_fields(self, data_source, catalog) -> None:
        data_source.universities["X"] = UniversityEntity(pubukprn="X", name="N", union_url="U")

        result = await catalog.get_university("X")

        assert result.model_dump(exclude_none=True) == {"pubukprn": "X", "name": "N", "union_url": "U"}

    async def test_with_supplement_merges_present_fields(self, data_source, supplements, catalog) -> None:
        data_source.universities["X"] = UniversityEntity(pubukprn="X", name="N", union_url="U")
        supplements.docs["X"] = {"_id": "abc", "pubukprn": "X", "color": "#fff", "lat": 1.0}

        result = await catalog.get_university("X")

        assert result.model_dump(exclude_none=True) == {
            "pubukprn": "X",
            "name": "N",
            "union_url": "U",
            "color": "#fff",
            "lat": 1.0,
        }

    async def test_camel_case_supplement_keys_are_mapped(self, data_source, supplements, catalog) -> None:
        supplements.docs["10007806"] = {
            "pubukprn": "10007806",
            "averageRent": 120.5,
            "uniLocationType": "Campus",
            "uniType": "Plate glass",
            "nearestTrainStation": "Falmer",
        }

        result = await catalog.get_university("10007806")

        assert result.average_rent == 120.5
        assert result.uni_location_type == "Campus"
        assert result.uni_type == "Plate glass"
        assert result.nearest_train_station == "Falmer"

    async def test_invalid_supplement_values_are_dropped(self, data_source, supplements, catalog) -> None:
        data_source.universities["X"] = UniversityEntity(pubukprn="X", name="N", union_url="U")
        supplements.docs["X"] = {"pubukprn": "X", "color": "#fff", "averageRent": "about 130"}

        result = await catalog.get_university("X")

        assert result.model_dump(exclude_none=True) == {"pubukprn": "X", "name": "N", "union_url": "U", "color": "#fff"}

    async def test_unusable_supplement_document_is_ignored(self, data_source, supplements, catalog) -> None:
        data_source.universities["X"] = UniversityEntity(pubukprn="X", name="N", union_url="U")
        supplements.docs["X"] = {"pubukprn": ["X"], "color": "#fff"}

        result = await catalog.get_university("X")

        assert result.model_dump(exclude_none=True) == {"pubukprn": "X", "name": "N", "union_url": "U"}

    async def test_supplement_lookup_uses_upstream_identifier(self, data_source, supplements, catalog) -> None:
        data_source.universities["alias"] = UniversityEntity(pubukprn="10007806", name="Sussex")

        await catalog.get_university("alias")

        assert supplements.lookups == ["10007806"]

    async def test_upstream_failure_fails_the_query(self, data_source, supplements, catalog) -> None:
        data_source.error = UpstreamUnavailable("down")

        with pytest.raises(UpstreamUnavailable):
            await catalog.get_university("10007806")
        assert supplements.lookups == []

    async def test_missing_identifier_is_rejected(self, catalog) -> None:
        with pytest.raises(ValueError):
            await catalog.get_university(None)


class TestLists:
    async def test_universities_are_not_enriched(self, supplements, catalog) -> None:
        items = await catalog.list_universities()

        assert [u.pubukprn for u in items] == ["10007806"]
        assert supplements.lookups == []

    async def test_course_list_is_returned_verbatim(self, catalog) -> None:
        items = await catalog.list_courses("10007806")

        assert [(c.title, c.kiscourseid, c.is_full_time) for c in items] == [
            ("Computer Science", "37310", "1"),
            ("Physics", "40001", "2"),
        ]


class TestGetCourse:
    async def test_course_detail_is_derived(self, catalog) -> None:
        course = await catalog.get_course("10007806", "37310", "1")

        assert course.title == "Computer Science MComp"
        assert course.years == 4
        assert course.placement_year_avaliable is True
        assert course.year_abroad_avaliable is False
        assert course.course_url == "https://www.sussex.ac.uk/study/cs"

    async def test_unusable_length_is_omitted(self, data_source, catalog) -> None:
        data_source.details[("10007806", "37310", "1")]["LengthInYears"] = "n/a"

        course = await catalog.get_course("10007806", "37310", "1")

        assert course.years is None
        assert course.title == "Computer Science MComp"

    async def test_missing_mode_is_rejected(self, data_source, catalog) -> None:
        with pytest.raises(ValueError):
            await catalog.get_course("10007806", "37310", None)
        assert not [c for c in data_source.calls if c[0] == "course"]
