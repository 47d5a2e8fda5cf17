from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorClientSession, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from adapters.external.database.api_key_repository_mongodb import ApiKeyRepositoryMongoDB
from adapters.external.database.university_supplement_repository_mongodb import (
    UniversitySupplementRepositoryMongoDB,
)
from config.settings import settings
from core.domain.errors import STORE_LOOKUP_FAILED, StoreUnavailable
from core.repositories.store_connection import StoreConnection, StoreConnector


def get_mongo_client(url: str | None = None) -> AsyncIOMotorClient:
    """
    Build the process-wide Motor client (connection pool).
    """
    return AsyncIOMotorClient(url or settings.MONGODB_URL)


class MongoStoreConnection(StoreConnection):
    """
    Per-request view on the database, bound to one client session.
    """

    def __init__(self, db: AsyncIOMotorDatabase, session: AsyncIOMotorClientSession) -> None:
        self._api_keys = ApiKeyRepositoryMongoDB(db, session=session)
        self._supplements = UniversitySupplementRepositoryMongoDB(db, session=session)

    @property
    def api_keys(self) -> ApiKeyRepositoryMongoDB:
        return self._api_keys

    @property
    def supplements(self) -> UniversitySupplementRepositoryMongoDB:
        return self._supplements


class MongoStoreConnector(StoreConnector):
    """
    Acquires a store connection per request.

    Sockets come from the shared Motor pool; acquiring pings the deployment and
    starts a client session, releasing ends that session.
    """

    def __init__(
        self,
        client: AsyncIOMotorClient,
        db_name: str,
        logger: logging.Logger | None = None,
    ) -> None:
        self._client = client
        self._db_name = db_name
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @property
    def db(self) -> AsyncIOMotorDatabase:
        return self._client[self._db_name]

    async def ensure_indexes(self) -> None:
        await ApiKeyRepositoryMongoDB(self.db).ensure_indexes()
        await UniversitySupplementRepositoryMongoDB(self.db).ensure_indexes()

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[MongoStoreConnection]:
        self._logger.debug("Connection initiated")
        try:
            await self._client.admin.command("ping")
            session = await self._client.start_session()
        except PyMongoError as exc:
            self._logger.error("Connection failed: %s", exc)
            raise StoreUnavailable(STORE_LOOKUP_FAILED) from exc

        self._logger.debug("Connection succeeded")
        try:
            yield MongoStoreConnection(self.db, session)
        finally:
            await session.end_session()
            self._logger.debug("Database connection closed")

    def close(self) -> None:
        self._client.close()
