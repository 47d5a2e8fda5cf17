from __future__ import annotations

from enum import Enum


class AuthState(str, Enum):
    """
    Authentication state of one request.

    UNCHECKED moves to exactly one of AUTHORIZED or REJECTED; REJECTED is terminal.
    """

    UNCHECKED = "UNCHECKED"
    AUTHORIZED = "AUTHORIZED"
    REJECTED = "REJECTED"
