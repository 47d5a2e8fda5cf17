from __future__ import annotations

from abc import ABC, abstractmethod


class ApiKeyRepository(ABC):
    """
    Abstraction for validating API keys against a storage.
    """

    @abstractmethod
    async def ensure_indexes(self) -> None: ...

    @abstractmethod
    async def find_api_key(self, key: str) -> bool:
        """
        Return True if an exact match for `key` is stored.
        """
        raise NotImplementedError
