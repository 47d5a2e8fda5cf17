from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from core.domain.entities.university_supplement_entity import UniversitySupplementEntity


class UniversitySummaryEntity(BaseModel):
    """
    One entry of the Unistats institution list.
    """

    pubukprn: str
    name: Optional[str] = None


class UniversityEntity(BaseModel):
    """
    A university as exposed by the gateway.

    `pubukprn`, `name` and `union_url` come from Unistats. The remaining fields come
    from the `uni` collection and stay unset when no supplement document exists.
    """

    pubukprn: str
    name: Optional[str] = None
    union_url: Optional[str] = None

    # Supplement (MongoDB)
    url: Optional[str] = None
    color: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    average_rent: Optional[float] = None
    uni_location_type: Optional[str] = None
    uni_type: Optional[str] = None
    nearest_train_station: Optional[str] = None

    def with_supplement(self, supplement: Optional[UniversitySupplementEntity]) -> UniversityEntity:
        """
        Return a copy enriched with the supplement fields that are present.
        """
        if supplement is None:
            return self
        return self.model_copy(update=supplement.present_fields())
