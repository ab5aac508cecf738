# auth_service/services/tenants/dto.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class TenantCreateIn:
    """
    Input DTO for tenant creation.

    :param name: Display name of the organisation.
    :type name: str
    :param address: Postal address.
    :type address: str
    """

    name: str
    address: str


@dataclass(frozen=True, slots=True)
class TenantOut:
    id: int
    name: str
    address: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
