"""Tenant repository."""

from __future__ import annotations

from auth_service.models.tenant import Tenant
from auth_service.repositories.base import BaseRepository


class TenantRepository(BaseRepository[Tenant]):
    """Persistence-only repository for :class:`Tenant`."""

    model = Tenant
