"""Project-wide constants shared by models, services and the API layer."""

from __future__ import annotations

from enum import StrEnum
from typing import Final


class Role(StrEnum):
    """Roles carried by the ``role`` claim of every token."""

    CUSTOMER = "customer"
    ADMIN = "admin"
    MANAGER = "manager"


ACCESS_TOKEN_COOKIE: Final[str] = "accessToken"
REFRESH_TOKEN_COOKIE: Final[str] = "refreshToken"
