# auth_service/services/tenants/service.py
from __future__ import annotations

import logging

from auth_service.models.tenant import Tenant
from auth_service.services._shared.base import BaseService
from auth_service.services._shared.errors import NotFoundError
from auth_service.services.tenants.dto import TenantCreateIn, TenantOut

log = logging.getLogger(__name__)


def _to_out(tenant: Tenant) -> TenantOut:
    return TenantOut(
        id=tenant.id,
        name=tenant.name,
        address=tenant.address,
        created_at=tenant.created_at,
        updated_at=tenant.updated_at,
    )


class TenantService(BaseService):
    """Tenant records. Independent of the token lifecycle."""

    def create(self, dto: TenantCreateIn) -> int:
        """Persist a tenant and return its id."""
        with self.rw_uow() as uow:
            tenant = uow.tenants.add(Tenant(name=dto.name, address=dto.address))
            tenant_id = tenant.id
        log.info("tenants.created", extra={"tenant_id": tenant_id})
        return tenant_id

    def get(self, tenant_id: int) -> TenantOut:
        """
        Return a tenant by id.

        :raises NotFoundError: If no tenant has ``tenant_id``.
        """
        with self.ro_uow() as uow:
            tenant = uow.tenants.get(tenant_id)
            if tenant is None:
                raise NotFoundError("Tenant", tenant_id)
            return _to_out(tenant)
