"""Repository package exposing persistence-layer access for the auth models."""

from __future__ import annotations

from auth_service.repositories.base import BaseRepository
from auth_service.repositories.refresh_token import RefreshTokenRepository
from auth_service.repositories.tenant import TenantRepository
from auth_service.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "RefreshTokenRepository",
    "TenantRepository",
    "UserRepository",
]
