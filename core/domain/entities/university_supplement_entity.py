from __future__ import annotations

from typing import Any, ClassVar, Dict, Optional, Set, Tuple

from pydantic import ConfigDict, Field, PrivateAttr, ValidationError

from core.domain.entities.base_entity import MongoEntity
from core.domain.errors import ResolutionIncomplete


class UniversitySupplementEntity(MongoEntity):
    """
    Hand-curated university fields stored in the `uni` collection.

    Documents use camelCase keys (e.g. "averageRent"); aliases map them to
    snake_case attributes. Joined to Unistats records by `pubukprn`.
    """

    pubukprn: str

    url: Optional[str] = None
    color: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    average_rent: Optional[float] = Field(default=None, alias="averageRent")
    uni_location_type: Optional[str] = Field(default=None, alias="uniLocationType")
    uni_type: Optional[str] = Field(default=None, alias="uniType")
    nearest_train_station: Optional[str] = Field(default=None, alias="nearestTrainStation")

    model_config = ConfigDict(populate_by_name=True)

    _rejected_fields: Tuple[str, ...] = PrivateAttr(default=())

    SUPPLEMENT_FIELDS: ClassVar[Tuple[str, ...]] = (
        "url",
        "color",
        "lat",
        "lon",
        "average_rent",
        "uni_location_type",
        "uni_type",
        "nearest_train_station",
    )

    def present_fields(self) -> Dict[str, Any]:
        """
        Supplement values that are actually set on the document.
        """
        out: Dict[str, Any] = {}
        for name in self.SUPPLEMENT_FIELDS:
            value = getattr(self, name)
            if value is not None:
                out[name] = value
        return out

    @property
    def rejected_fields(self) -> Tuple[str, ...]:
        """
        Document keys whose values could not be used and were left out.
        """
        return self._rejected_fields

    @classmethod
    def from_mongo(cls, doc: Optional[Dict[str, Any]]) -> Optional[UniversitySupplementEntity]:
        """
        Validate a hand-edited document, dropping optional values that do not validate.

        Raises ResolutionIncomplete when `pubukprn` itself is unusable.
        """
        try:
            return super().from_mongo(doc)
        except ValidationError as exc:
            rejected = cls._invalid_keys(exc)

        if "pubukprn" in rejected:
            raise ResolutionIncomplete("supplement document has no usable pubukprn")

        entity = super().from_mongo({k: v for k, v in doc.items() if k not in rejected})
        entity._rejected_fields = tuple(sorted(k for k in rejected if k in doc))
        return entity

    @classmethod
    def _invalid_keys(cls, exc: ValidationError) -> Set[str]:
        keys = {str(err["loc"][0]) for err in exc.errors() if err.get("loc")}
        # an error may be reported under the field name or its alias
        for name, info in cls.model_fields.items():
            if name in keys or (info.alias and info.alias in keys):
                keys.add(name)
                if info.alias:
                    keys.add(info.alias)
        return keys
