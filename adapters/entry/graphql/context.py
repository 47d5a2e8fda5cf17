"""Per-request context shared between the HTTP pipeline and GraphQL resolvers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from core.domain.auth_state import AuthState
from core.repositories.store_connection import StoreConnection
from core.repositories.university_data_source import UniversityDataSource
from core.usecases.university_catalog_use_case import UniversityCatalogUseCase

SCOPE_STATE_KEY = "request_context"


@dataclass
class RequestContext:
    """
    Owned by one request: its store connection, auth state and catalog use case.
    """

    connection: StoreConnection
    data_source: UniversityDataSource
    auth_state: AuthState = AuthState.UNCHECKED
    _catalog: Optional[UniversityCatalogUseCase] = field(default=None, repr=False)

    @property
    def catalog(self) -> UniversityCatalogUseCase:
        if self._catalog is None:
            self._catalog = UniversityCatalogUseCase(
                data_source=self.data_source,
                supplements=self.connection.supplements,
            )
        return self._catalog

    def authorize(self) -> None:
        if self.auth_state is not AuthState.UNCHECKED:
            raise RuntimeError(f"auth already settled: {self.auth_state.value}")
        self.auth_state = AuthState.AUTHORIZED

    def reject(self) -> None:
        if self.auth_state is not AuthState.UNCHECKED:
            raise RuntimeError(f"auth already settled: {self.auth_state.value}")
        self.auth_state = AuthState.REJECTED
