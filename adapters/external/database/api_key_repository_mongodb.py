from __future__ import annotations

import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClientSession, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from core.domain.entities.api_key_entity import ApiKeyEntity
from core.domain.errors import STORE_LOOKUP_FAILED, StoreUnavailable
from core.repositories.api_key_repository import ApiKeyRepository


class ApiKeyRepositoryMongoDB(ApiKeyRepository):
    """
    MongoDB repository for API keys.

    Documents: {"key": "<apikey>"}; a key is valid when an exact match exists.
    """

    COLLECTION = "keys"

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
        await col.create_index([("key", 1)], unique=True)

    async def find_api_key(self, key: str) -> bool:
        col = self._db[self.COLLECTION]
        try:
            doc = await col.find_one({"key": str(key)}, {"_id": 1, "key": 1}, session=self._session)
        except PyMongoError as exc:
            # driver messages carry cluster host names
            self._logger.error("API key lookup failed: %s", exc)
            raise StoreUnavailable(STORE_LOOKUP_FAILED) from exc
        return ApiKeyEntity.from_mongo(doc) is not None
