"""Shared API helpers: service lookup, cookie transport and auth guards."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, TypeVar, cast

from flask import Response, current_app, g, jsonify, request

from auth_service.core.constants import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE
from auth_service.core.errors import Unauthorized
from auth_service.core.wiring import EXTENSION_KEY, AuthComponents
from auth_service.services.auth.service import AuthService
from auth_service.services.tenants.service import TenantService
from auth_service.services.tokens.dto import Claims, TokenPair
from auth_service.services.tokens.service import TokenLifecycleService

F = TypeVar("F", bound=Callable[..., Any])


# --------------------------------------------------------------------------- #
# Service lookup
# --------------------------------------------------------------------------- #


def _components() -> AuthComponents:
    return cast(AuthComponents, current_app.extensions[EXTENSION_KEY])


def get_auth_service() -> AuthService:
    """Return the application-scoped :class:`AuthService`."""
    return _components().auth


def get_token_service() -> TokenLifecycleService:
    """Return the application-scoped :class:`TokenLifecycleService`."""
    return _components().tokens


def get_tenant_service() -> TenantService:
    return _components().tenants


# --------------------------------------------------------------------------- #
# Responses
# --------------------------------------------------------------------------- #


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]


# --------------------------------------------------------------------------- #
# Cookies
# --------------------------------------------------------------------------- #


def _cookie_options() -> dict[str, Any]:
    return {
        "domain": current_app.config.get("AUTH_COOKIE_DOMAIN"),
        "secure": bool(current_app.config.get("AUTH_COOKIE_SECURE", False)),
        "httponly": True,
        "samesite": "Strict",
        "path": "/",
    }


def set_auth_cookies(response: Response, pair: TokenPair) -> Response:
    """
    Attach the access and refresh cookies for ``pair``.

    The access cookie lives as long as the access token; the refresh cookie
    lives until the refresh token (and its ledger record) expires.
    """
    options = _cookie_options()
    access_max_age = int(current_app.config.get("ACCESS_TOKEN_TTL_SECONDS", 3600))
    refresh_max_age = max(0, int((pair.refresh_expires_at - datetime.now(UTC)).total_seconds()))
    response.set_cookie(ACCESS_TOKEN_COOKIE, pair.access_token, max_age=access_max_age, **options)
    response.set_cookie(REFRESH_TOKEN_COOKIE, pair.refresh_token, max_age=refresh_max_age, **options)
    return response


def clear_auth_cookies(response: Response) -> Response:
    """Expire both token cookies on the client."""
    options = _cookie_options()
    for name in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
        response.delete_cookie(
            name,
            path=options["path"],
            domain=options["domain"],
            secure=options["secure"],
            httponly=True,
            samesite="Strict",
        )
    return response


# --------------------------------------------------------------------------- #
# Auth guards
# --------------------------------------------------------------------------- #


def _access_token_from_request() -> str | None:
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if token:
        return token
    header = request.headers.get("Authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return None


def refresh_token_from_request() -> str | None:
    """Return the refresh token cookie, if any."""
    return request.cookies.get(REFRESH_TOKEN_COOKIE) or None


def current_claims() -> Claims:
    """Return the claims stored by :func:`require_auth`."""
    return cast(Claims, g.claims)


def require_auth(func: F) -> F:
    """Ensure the request carries a valid access token (cookie or Bearer)."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        token = _access_token_from_request()
        if not token:
            raise Unauthorized("Missing access token")
        g.claims = get_token_service().verify_access(token)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
