# core/domain/entities/base_entity.py
from __future__ import annotations

from typing import Any, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict

E = TypeVar("E", bound="MongoEntity")


class MongoEntity(BaseModel):
    """
    Base for documents read from the UniNinja database (`keys`, `uni`).

    Both collections are maintained by hand, so unknown keys are kept as extras
    and the ObjectId is exposed as a plain string `id`.
    """

    id: Optional[str] = None

    model_config = ConfigDict(extra="allow")

    @classmethod
    def from_mongo(cls: Type[E], doc: Optional[dict[str, Any]]) -> Optional[E]:
        """Validate a raw document; None when the lookup matched nothing."""
        if not doc:
            return None
        data = {k: v for k, v in doc.items() if k != "_id"}
        if "_id" in doc:
            data["id"] = str(doc["_id"])
        return cls.model_validate(data)
