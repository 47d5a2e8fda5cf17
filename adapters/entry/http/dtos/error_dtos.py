from __future__ import annotations

from typing import List, Mapping, Optional

from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field


UNAUTHORISED_MESSAGE = "You must be authorised to use the UniNinja API."
UNAVAILABLE_MESSAGE = (
    "An internal server error occurred whilst using the UniNinja API. Please try again later."
)
AUTH_CHALLENGE = "Basic realm='UniNinja API'"


class ErrorOutDTO(BaseModel):
    message: str


class ErrorEnvelopeDTO(BaseModel):
    """
    Transport-level error body, shaped like a GraphQL error array.
    """

    errors: List[ErrorOutDTO] = Field(default_factory=list)

    @classmethod
    def of(cls, message: str) -> ErrorEnvelopeDTO:
        return cls(errors=[ErrorOutDTO(message=message)])

    def to_response(self, status_code: int, headers: Optional[Mapping[str, str]] = None) -> JSONResponse:
        return JSONResponse(status_code=status_code, content=self.model_dump(), headers=dict(headers or {}))


def unauthorized_response() -> JSONResponse:
    return ErrorEnvelopeDTO.of(UNAUTHORISED_MESSAGE).to_response(
        401,
        headers={"WWW-Authenticate": AUTH_CHALLENGE},
    )


def unavailable_response() -> JSONResponse:
    # Driver messages carry cluster host names; they are logged, not returned.
    return ErrorEnvelopeDTO.of(UNAVAILABLE_MESSAGE).to_response(503)


def internal_error_response() -> JSONResponse:
    return ErrorEnvelopeDTO.of(UNAVAILABLE_MESSAGE).to_response(500)
