# tests/unit/services/test_tenant_service.py
from __future__ import annotations

import pytest

from auth_service.models import Tenant
from auth_service.services._shared.errors import NotFoundError
from auth_service.services.tenants.dto import TenantCreateIn
from auth_service.services.tenants.service import TenantService
from tests.factories.tenant import TenantFactory


@pytest.fixture()
def service() -> TenantService:
    return TenantService()


def test_create_persists_tenant(service, session):
    tenant_id = service.create(TenantCreateIn(name="Tenant Name", address="Tenant Address"))

    (tenant,) = session.query(Tenant).all()
    assert tenant.id == tenant_id
    assert tenant.name == "Tenant Name"
    assert tenant.address == "Tenant Address"


def test_get_returns_tenant(service, session):
    tenant = TenantFactory(name="Acme", address="1 Main St")
    session.commit()

    out = service.get(tenant.id)

    assert (out.id, out.name, out.address) == (tenant.id, "Acme", "1 Main St")


def test_get_unknown_tenant(service):
    with pytest.raises(NotFoundError):
        service.get(987654)
