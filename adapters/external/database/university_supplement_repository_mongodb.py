from __future__ import annotations

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClientSession, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from core.domain.entities.university_supplement_entity import UniversitySupplementEntity
from core.domain.errors import STORE_LOOKUP_FAILED, StoreUnavailable
from core.repositories.university_supplement_repository import UniversitySupplementRepository


class UniversitySupplementRepositoryMongoDB(UniversitySupplementRepository):
    """
    MongoDB repository for hand-curated university fields.

    Uses the `uni` collection keyed by "pubukprn" (the Unistats UKPRN).
    """

    COLLECTION = "uni"

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        session: Optional[AsyncIOMotorClientSession] = None,
        logger: logging.Logger | None = None,
    ):
        self._db = db
        self._session = session
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    async def ensure_indexes(self) -> None:
        col = self._db[self.COLLECTION]
        await col.create_index([("pubukprn", 1)], unique=True)

    async def find_university_supplement(self, pubukprn: str) -> UniversitySupplementEntity | None:
        col = self._db[self.COLLECTION]
        try:
            doc = await col.find_one({"pubukprn": str(pubukprn)}, session=self._session)
        except PyMongoError as exc:
            self._logger.error("Supplement lookup failed pubukprn=%s: %s", pubukprn, exc)
            raise StoreUnavailable(STORE_LOOKUP_FAILED) from exc
        return UniversitySupplementEntity.from_mongo(doc) if doc else None
