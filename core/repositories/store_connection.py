from __future__ import annotations

from abc import ABC, abstractmethod
from typing import AsyncContextManager

from core.repositories.api_key_repository import ApiKeyRepository
from core.repositories.university_supplement_repository import UniversitySupplementRepository


class StoreConnection(ABC):
    """
    A document store connection held for the lifetime of one request.
    """

    @property
    @abstractmethod
    def api_keys(self) -> ApiKeyRepository: ...

    @property
    @abstractmethod
    def supplements(self) -> UniversitySupplementRepository: ...


class StoreConnector(ABC):
    """
    Hands out per-request store connections.

    `connect()` raises StoreUnavailable when no connection can be acquired and
    releases the connection on every exit path of the `async with` block.
    """

    @abstractmethod
    def connect(self) -> AsyncContextManager[StoreConnection]: ...
