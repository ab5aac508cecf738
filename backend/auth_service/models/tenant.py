"""Tenant model: an organisation record (name and postal address)."""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from auth_service.core.extensions import db

from .base import PKMixin, TimestampMixin


class Tenant(PKMixin, TimestampMixin, db.Model):
    """Organisation served by the platform. Tokens carry no tenant scope."""

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    address: Mapped[str] = mapped_column(String(255), nullable=False)
