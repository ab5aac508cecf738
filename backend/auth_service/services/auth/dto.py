# auth_service/services/auth/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from auth_service.core.constants import Role
from auth_service.services.tokens.dto import TokenPair

# ---------------------------- Input DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class RegisterIn:
    """
    Input DTO for self-registration.

    :param first_name: Given name.
    :type first_name: str
    :param last_name: Family name.
    :type last_name: str
    :param email: Email address (normalized by the model).
    :type email: str
    :param password: Raw password (hashed before persistence).
    :type password: str
    """

    first_name: str
    last_name: str
    email: str
    password: str


@dataclass(frozen=True, slots=True)
class LoginIn:
    """
    Input DTO for login.

    :param email: User email.
    :type email: str
    :param password: Raw password (to be verified).
    :type password: str
    """

    email: str
    password: str


# --------------------------- Output DTOs ---------------------------------- #


@dataclass(frozen=True, slots=True)
class AuthResultOut:
    """
    Outcome of register / login / refresh.

    :param user_id: Authenticated user id.
    :type user_id: int
    :param tokens: Newly issued access/refresh pair.
    :type tokens: TokenPair
    """

    user_id: int
    tokens: TokenPair


@dataclass(frozen=True, slots=True)
class UserPublicOut:
    """Public profile of a user (never includes the password hash)."""

    id: int
    first_name: str
    last_name: str
    email: str
    role: Role
    created_at: datetime | None = None
    updated_at: datetime | None = None
