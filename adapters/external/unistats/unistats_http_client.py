from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from core.domain.entities.course_entity import CourseSummaryEntity
from core.domain.entities.university_entity import UniversityEntity, UniversitySummaryEntity
from core.domain.errors import UpstreamUnavailable
from core.repositories.university_data_source import UniversityDataSource


class UnistatsHttpClient(UniversityDataSource):
    """
    Minimal Unistats KIS API client.

    Uses GET on:
      /Institutions.json?pageSize=1000
      /Institution/{pubukprn}.json
      /Institution/{pubukprn}/Courses.json?pageSize=300
      /Institution/{pubukprn}/Course/{kiscourseid}/{mode}.json

    Authorization:
      Basic {auth}  (auth is the base64 "user:password" issued by Unistats)
    """

    UNIVERSITY_PAGE_SIZE = 1000
    COURSE_PAGE_SIZE = 300

    def __init__(
        self,
        *,
        base_url: str,
        auth: str,
        timeout_s: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._base_url = str(base_url).rstrip("/")
        self._auth = str(auth).strip()
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_s, connect=5.0),
            transport=transport,
        )
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        headers = {
            "Accept": "application/json",
            "Authorization": f"Basic {self._auth}",
        }
        url = f"{self._base_url}{path}"
        try:
            r = await self._client.get(url, headers=headers, params=params)
            r.raise_for_status()
            return r.json()
        except httpx.HTTPError as exc:
            self._logger.error("Unistats request failed path=%s: %s", path, exc)
            raise UpstreamUnavailable(f"Unistats request failed: {path}") from exc
        except ValueError as exc:
            self._logger.error("Unistats returned non-JSON body path=%s: %s", path, exc)
            raise UpstreamUnavailable(f"Unistats returned an invalid response: {path}") from exc

    async def _get_list(self, path: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        data = await self._get_json(path, params=params)
        if not isinstance(data, list):
            raise UpstreamUnavailable(f"Unistats returned a non-list response: {path}")
        return [x for x in data if isinstance(x, dict)]

    async def _get_object(self, path: str) -> Dict[str, Any]:
        data = await self._get_json(path)
        if not isinstance(data, dict):
            raise UpstreamUnavailable(f"Unistats returned a non-object response: {path}")
        return data

    async def fetch_university_list(self) -> List[UniversitySummaryEntity]:
        rows = await self._get_list("/Institutions.json", params={"pageSize": self.UNIVERSITY_PAGE_SIZE})
        return [
            UniversitySummaryEntity(pubukprn=str(row["UKPRN"]), name=row.get("Name"))
            for row in rows
            if row.get("UKPRN") is not None
        ]

    async def fetch_university(self, pubukprn: str) -> UniversityEntity:
        data = await self._get_object(f"/Institution/{_segment(pubukprn)}.json")
        ukprn = data.get("UKPRN")
        if ukprn is None:
            raise UpstreamUnavailable(f"Unistats institution has no UKPRN: {pubukprn}")
        return UniversityEntity(
            pubukprn=str(ukprn),
            name=data.get("Name"),
            union_url=data.get("StudentUnionUrl"),
        )

    async def fetch_courses(self, pubukprn: str) -> List[CourseSummaryEntity]:
        rows = await self._get_list(
            f"/Institution/{_segment(pubukprn)}/Courses.json",
            params={"pageSize": self.COURSE_PAGE_SIZE},
        )
        return [
            CourseSummaryEntity(
                title=row.get("Title"),
                kiscourseid=str(row["KisCourseId"]),
                is_full_time=str(row["KisMode"]) if row.get("KisMode") is not None else None,
            )
            for row in rows
            if row.get("KisCourseId") is not None
        ]

    async def fetch_course_detail(self, pubukprn: str, kiscourseid: str, mode: str) -> Dict[str, Any]:
        path = f"/Institution/{_segment(pubukprn)}/Course/{_segment(kiscourseid)}/{_segment(mode)}.json"
        return await self._get_object(path)


def _segment(value: str) -> str:
    """
    Percent-encode a caller-supplied identifier as one URL path segment.
    """
    value = str(value)
    if value in ("", ".", ".."):
        raise ValueError(f"invalid Unistats identifier: {value!r}")
    return quote(value, safe="")
