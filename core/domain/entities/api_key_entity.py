from __future__ import annotations

from core.domain.entities.base_entity import MongoEntity


class ApiKeyEntity(MongoEntity):
    """
    An API key granting access to the GraphQL endpoint.

    Presence in the `keys` collection is the only grant; there is no expiry or scope.
    """

    key: str
