"""Tenant endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from auth_service.api.deps import get_tenant_service, json_response, timing
from auth_service.schemas import TenantCreatedSchema, TenantCreateSchema, TenantSchema
from auth_service.services.tenants.dto import TenantCreateIn

bp = Blueprint("tenants", __name__)

tenant_create_schema = TenantCreateSchema()
tenant_created_schema = TenantCreatedSchema()
tenant_schema = TenantSchema()


@bp.post("")
@timing
def create_tenant():
    """Create a tenant and return its id."""

    payload = tenant_create_schema.load(request.get_json(silent=True) or {})
    tenant_id = get_tenant_service().create(TenantCreateIn(**payload))
    return json_response(tenant_created_schema.dump({"id": tenant_id}), status=201)


@bp.get("/<int:tenant_id>")
@timing
def get_tenant(tenant_id: int):
    return json_response(tenant_schema.dump(get_tenant_service().get(tenant_id)))
