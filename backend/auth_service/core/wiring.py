"""Composition root: build the token stack once per application.

Key material is read here, at startup, and injected into the issuer and the
verifier. Request handlers reach the services through
``current_app.extensions["auth"]`` (see :mod:`auth_service.api.deps`).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import TYPE_CHECKING

from flask import Flask

from auth_service.core.keys import KeyMaterialProvider
from auth_service.services._shared.ports import RefreshTokenLedger

if TYPE_CHECKING:
    from auth_service.services.auth.service import AuthService
    from auth_service.services.tenants.service import TenantService
    from auth_service.services.tokens.service import TokenLifecycleService

EXTENSION_KEY = "auth"


@dataclass(frozen=True, slots=True)
class AuthComponents:
    """Application-scoped singletons of the token stack."""

    keys: KeyMaterialProvider
    ledger: RefreshTokenLedger
    tokens: TokenLifecycleService
    auth: AuthService
    tenants: TenantService


def build_ledger(app: Flask) -> RefreshTokenLedger:
    """Return the ledger selected by ``REFRESH_LEDGER_BACKEND``."""
    backend = str(app.config.get("REFRESH_LEDGER_BACKEND", "sql")).lower()
    if backend == "sql":
        from auth_service.infra.sqlalchemy.sql_refresh_token_ledger import SQLRefreshTokenLedger

        return SQLRefreshTokenLedger()
    if backend == "redis":
        from auth_service.core.extensions import get_redis
        from auth_service.infra.redis.redis_refresh_token_ledger import RedisRefreshTokenLedger

        return RedisRefreshTokenLedger(r=get_redis())
    raise RuntimeError(f"Unknown REFRESH_LEDGER_BACKEND {backend!r}")


def init_app(app: Flask) -> AuthComponents:
    """Wire keys, ledger, issuer, verifier and services into ``app.extensions``."""
    from auth_service.infra.jwt.token_issuer import JWTTokenIssuer
    from auth_service.infra.jwt.token_verifier import JWTTokenVerifier
    from auth_service.infra.security.password import PasswordHashVerifier
    from auth_service.services.auth.service import AuthService
    from auth_service.services.tenants.service import TenantService
    from auth_service.services.tokens.service import TokenLifecycleService

    keys = KeyMaterialProvider.from_config(app.config)
    ledger = build_ledger(app)
    issuer_name = app.config.get("JWT_ISSUER", "auth-service")

    tokens = TokenLifecycleService(
        issuer=JWTTokenIssuer(
            keys,
            ledger,
            issuer=issuer_name,
            access_ttl=timedelta(seconds=int(app.config.get("ACCESS_TOKEN_TTL_SECONDS", 3600))),
        ),
        verifier=JWTTokenVerifier(keys, ledger, issuer=issuer_name),
        ledger=ledger,
    )
    components = AuthComponents(
        keys=keys,
        ledger=ledger,
        tokens=tokens,
        auth=AuthService(tokens=tokens, credentials=PasswordHashVerifier()),
        tenants=TenantService(),
    )
    app.extensions[EXTENSION_KEY] = components
    return components
