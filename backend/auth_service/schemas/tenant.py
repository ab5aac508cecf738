"""Tenant Marshmallow schemas."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from .auth import _TrimmedInputSchema


class TenantCreateSchema(_TrimmedInputSchema):
    """Input payload for ``POST /tenants``."""

    name = fields.String(
        required=True,
        validate=validate.Length(min=1, max=100, error="Tenant name is required"),
    )
    address = fields.String(
        required=True,
        validate=validate.Length(min=1, max=255, error="Tenant address is required"),
    )


class TenantCreatedSchema(Schema):
    id = fields.Integer(required=True)


class TenantSchema(Schema):
    """Tenant as returned by ``GET /tenants/<id>``."""

    id = fields.Integer(required=True)
    name = fields.String(required=True)
    address = fields.String(required=True)
    created_at = fields.DateTime(data_key="createdAt", allow_none=True)
    updated_at = fields.DateTime(data_key="updatedAt", allow_none=True)
