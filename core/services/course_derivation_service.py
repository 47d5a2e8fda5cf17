from __future__ import annotations

from typing import Any, Dict, Optional

from core.domain.entities.course_entity import CourseEntity
from core.domain.errors import ResolutionIncomplete


class CourseDerivationService:
    """
    Builds the exposed course record from a raw Unistats course detail.

    Rules:
    - "available" flags are true only for a numeric value greater than zero
      (SandwichAvailable -> placement year, YearAbroadAvaliable -> year abroad).
    - LengthInYears is parsed only when present and non-empty; otherwise `years` stays unset.
    - title is "{Title} {KisAimLabel}" when the aim label is present.
    """

    @staticmethod
    def is_available(value: Any) -> bool:
        if value is None or isinstance(value, bool):
            return bool(value)
        try:
            return float(value) > 0
        except (TypeError, ValueError):
            return False

    @staticmethod
    def parse_years(value: Any) -> Optional[int]:
        """
        Parse the course length. Raises ResolutionIncomplete on an unusable value.
        """
        if not value:
            return None
        text = str(value).strip()
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return int(float(text))
        except ValueError as exc:
            raise ResolutionIncomplete(f"LengthInYears is not numeric: {text!r}") from exc

    @staticmethod
    def build_title(title: Optional[str], aim_label: Optional[str]) -> Optional[str]:
        parts = [p.strip() for p in (title, aim_label) if p and str(p).strip()]
        return " ".join(parts) if parts else None

    @classmethod
    def build(
        cls,
        raw: Dict[str, Any],
        *,
        kiscourseid: str,
        mode: str,
        years: Optional[int] = None,
    ) -> CourseEntity:
        """
        Compose a CourseEntity; `years` is derived separately so the caller can decide
        how to treat an unusable length.
        """
        return CourseEntity(
            title=cls.build_title(raw.get("Title"), raw.get("KisAimLabel")),
            kiscourseid=str(kiscourseid),
            is_full_time=mode,
            course_url=raw.get("CoursePageUrl"),
            years=years,
            placement_year_avaliable=cls.is_available(raw.get("SandwichAvailable")),
            year_abroad_avaliable=cls.is_available(raw.get("YearAbroadAvaliable")),
            degree_label=raw.get("KisAimLabel"),
            is_hons=raw.get("Honours"),
        )
