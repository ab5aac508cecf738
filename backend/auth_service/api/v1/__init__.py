"""Version 1 routes: health, the ``/auth`` session endpoints and tenants."""

from __future__ import annotations

from flask import Blueprint

from .auth import bp as auth_bp
from .health import bp as health_bp
from .tenants import bp as tenants_bp

API_VERSION = "v1"

REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),
    (auth_bp, "/auth"),
    (tenants_bp, "/tenants"),
]
