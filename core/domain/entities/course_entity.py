from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel


class CourseSummaryEntity(BaseModel):
    """
    One entry of an institution's Unistats course list.

    `is_full_time` carries the raw KIS mode indicator and is passed back
    verbatim when the course detail is requested.
    """

    title: Optional[str] = None
    kiscourseid: str
    is_full_time: Optional[str] = None


class CourseEntity(BaseModel):
    """
    Course detail composed from the Unistats course record.

    `years` stays unset when Unistats has no usable course length, so an unknown
    length is never reported as zero years.
    """

    title: Optional[str] = None
    kiscourseid: str
    is_full_time: Optional[str] = None
    course_url: Optional[str] = None
    years: Optional[int] = None
    placement_year_avaliable: bool = False
    year_abroad_avaliable: bool = False
    degree_label: Optional[str] = None
    is_hons: Any = None  # opaque passthrough of KIS "Honours"
