"""Shared pytest fixtures: in-memory store and upstream doubles."""

from __future__ import annotations

import base64
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx
import pytest

from core.domain.entities.course_entity import CourseSummaryEntity
from core.domain.entities.university_entity import UniversityEntity, UniversitySummaryEntity
from core.domain.entities.university_supplement_entity import UniversitySupplementEntity
from core.domain.errors import UpstreamUnavailable
from core.repositories.api_key_repository import ApiKeyRepository
from core.repositories.store_connection import StoreConnection, StoreConnector
from core.repositories.university_data_source import UniversityDataSource
from core.repositories.university_supplement_repository import UniversitySupplementRepository

SUSSEX = "10007806"
VALID_KEY = "test-key"


def basic_auth(key: str) -> str:
    return "Basic " + base64.b64encode(f"{key}:".encode()).decode()


class InMemoryApiKeyRepository(ApiKeyRepository):
    def __init__(self, keys: tuple[str, ...] = (), error: Optional[Exception] = None) -> None:
        self.keys = set(keys)
        self.error = error
        self.lookups: List[str] = []

    async def ensure_indexes(self) -> None:
        return None

    async def find_api_key(self, key: str) -> bool:
        self.lookups.append(key)
        if self.error is not None:
            raise self.error
        return key in self.keys


class InMemorySupplementRepository(UniversitySupplementRepository):
    def __init__(self, docs: Optional[List[Dict[str, Any]]] = None) -> None:
        self.docs = {d["pubukprn"]: d for d in docs or []}
        self.lookups: List[str] = []

    async def ensure_indexes(self) -> None:
        return None

    async def find_university_supplement(self, pubukprn: str) -> Optional[UniversitySupplementEntity]:
        self.lookups.append(pubukprn)
        return UniversitySupplementEntity.from_mongo(self.docs.get(pubukprn))


class InMemoryStoreConnection(StoreConnection):
    def __init__(self, api_keys: ApiKeyRepository, supplements: UniversitySupplementRepository) -> None:
        self._api_keys = api_keys
        self._supplements = supplements

    @property
    def api_keys(self) -> ApiKeyRepository:
        return self._api_keys

    @property
    def supplements(self) -> UniversitySupplementRepository:
        return self._supplements


class InMemoryStoreConnector(StoreConnector):
    """
    Records "open"/"close" into a shared event log so tests can check ordering.
    """

    def __init__(
        self,
        api_keys: InMemoryApiKeyRepository,
        supplements: InMemorySupplementRepository,
        events: List[str],
    ) -> None:
        self.api_keys = api_keys
        self.supplements = supplements
        self.events = events
        self.connect_error: Optional[Exception] = None
        self.opened = 0
        self.closed = 0

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[InMemoryStoreConnection]:
        if self.connect_error is not None:
            raise self.connect_error
        self.opened += 1
        self.events.append("open")
        try:
            yield InMemoryStoreConnection(self.api_keys, self.supplements)
        finally:
            self.closed += 1
            self.events.append("close")


class FakeDataSource(UniversityDataSource):
    def __init__(self) -> None:
        self.universities: Dict[str, UniversityEntity] = {}
        self.courses: Dict[str, List[CourseSummaryEntity]] = {}
        self.details: Dict[tuple[str, str, str], Dict[str, Any]] = {}
        self.error: Optional[Exception] = None
        self.calls: List[tuple] = []

    def _check(self) -> None:
        if self.error is not None:
            raise self.error

    async def fetch_university_list(self) -> List[UniversitySummaryEntity]:
        self.calls.append(("universities",))
        self._check()
        return [UniversitySummaryEntity(pubukprn=u.pubukprn, name=u.name) for u in self.universities.values()]

    async def fetch_university(self, pubukprn: str) -> UniversityEntity:
        self.calls.append(("university", pubukprn))
        self._check()
        if pubukprn not in self.universities:
            raise UpstreamUnavailable(f"Unistats request failed: /Institution/{pubukprn}.json")
        return self.universities[pubukprn]

    async def fetch_courses(self, pubukprn: str) -> List[CourseSummaryEntity]:
        self.calls.append(("courses", pubukprn))
        self._check()
        return list(self.courses.get(pubukprn, []))

    async def fetch_course_detail(self, pubukprn: str, kiscourseid: str, mode: str) -> Dict[str, Any]:
        self.calls.append(("course", pubukprn, kiscourseid, mode))
        self._check()
        key = (pubukprn, kiscourseid, mode)
        if key not in self.details:
            raise UpstreamUnavailable("Unistats request failed")
        return dict(self.details[key])


@pytest.fixture
def auth_headers() -> Dict[str, str]:
    return {"Authorization": basic_auth(VALID_KEY)}


@pytest.fixture
def events() -> List[str]:
    return []


@pytest.fixture
def api_keys() -> InMemoryApiKeyRepository:
    return InMemoryApiKeyRepository(keys=(VALID_KEY,))


@pytest.fixture
def supplements() -> InMemorySupplementRepository:
    return InMemorySupplementRepository()


@pytest.fixture
def connector(
    api_keys: InMemoryApiKeyRepository,
    supplements: InMemorySupplementRepository,
    events: List[str],
) -> InMemoryStoreConnector:
    return InMemoryStoreConnector(api_keys, supplements, events)


@pytest.fixture
def data_source() -> FakeDataSource:
    ds = FakeDataSource()
    ds.universities[SUSSEX] = UniversityEntity(
        pubukprn=SUSSEX,
        name="University of Sussex",
        union_url="https://www.sussexstudent.com",
    )
    ds.courses[SUSSEX] = [
        CourseSummaryEntity(title="Computer Science", kiscourseid="37310", is_full_time="1"),
        CourseSummaryEntity(title="Physics", kiscourseid="40001", is_full_time="2"),
    ]
    ds.details[(SUSSEX, "37310", "1")] = {
        "Title": "Computer Science",
        "KisAimLabel": "MComp",
        "CoursePageUrl": "https://www.sussex.ac.uk/study/cs",
        "LengthInYears": "4",
        "SandwichAvailable": 1,
        "YearAbroadAvaliable": 0,
        "Honours": 1,
    }
    return ds


@pytest.fixture
async def client(connector: InMemoryStoreConnector, data_source: FakeDataSource) -> AsyncIterator[httpx.AsyncClient]:
    from main import create_app

    app = create_app(connector=connector, data_source=data_source)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
