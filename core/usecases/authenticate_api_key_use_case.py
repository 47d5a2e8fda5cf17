from __future__ import annotations

import base64
import binascii
import logging
from typing import Optional

from core.domain.errors import AuthRejected
from core.repositories.api_key_repository import ApiKeyRepository


class AuthenticateApiKeyUseCase:
    """
    Validates a Basic-style Authorization header against the stored API keys.

    Clients send `Authorization: Basic base64("<apikey>:")`; only the part before
    the first colon is used.

    Raises:
        AuthRejected: header absent, not Basic, not decodable, or key unknown.
        StoreUnavailable: propagated from the repository.
    """

    SCHEME = "basic"

    def __init__(self, *, api_key_repo: ApiKeyRepository, logger: logging.Logger | None = None) -> None:
        self._repo = api_key_repo
        self._logger = logger or logging.getLogger(self.__class__.__name__)

    @classmethod
    def extract_api_key(cls, authorization: Optional[str]) -> str:
        if not authorization:
            raise AuthRejected("Authorization header is missing")

        scheme, _, token = authorization.strip().partition(" ")
        if scheme.lower() != cls.SCHEME or not token.strip():
            raise AuthRejected("Authorization header is not a Basic credential")

        try:
            decoded = base64.b64decode(token.strip(), validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise AuthRejected("Authorization credential cannot be decoded") from exc

        api_key = decoded.split(":", 1)[0]
        if not api_key:
            raise AuthRejected("Authorization credential has an empty key")
        return api_key

    async def execute(self, authorization: Optional[str]) -> str:
        """
        Return the authenticated API key.
        """
        api_key = self.extract_api_key(authorization)
        if not await self._repo.find_api_key(api_key):
            self._logger.info("Rejected unknown API key")
            raise AuthRejected("Unknown API key")
        return api_key
