"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import AuthResultSchema, LoginSchema, RegisterSchema, UserPublicSchema
from .tenant import TenantCreatedSchema, TenantCreateSchema, TenantSchema

__all__ = [
    "AuthResultSchema",
    "LoginSchema",
    "RegisterSchema",
    "TenantCreateSchema",
    "TenantCreatedSchema",
    "TenantSchema",
    "UserPublicSchema",
]
