"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, Response, request

from auth_service.api.deps import (
    clear_auth_cookies,
    current_claims,
    get_auth_service,
    json_response,
    refresh_token_from_request,
    require_auth,
    set_auth_cookies,
    timing,
)
from auth_service.core.errors import Unauthorized
from auth_service.schemas import (
    AuthResultSchema,
    LoginSchema,
    RegisterSchema,
    UserPublicSchema,
)
from auth_service.services.auth.dto import LoginIn, RegisterIn

bp = Blueprint("auth", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
auth_result_schema = AuthResultSchema()
user_public_schema = UserPublicSchema()


@bp.post("/register")
@timing
def register():
    """Create a customer account, set the token cookies and return its id."""

    payload = register_schema.load(request.get_json(silent=True) or {})
    result = get_auth_service().register(RegisterIn(**payload))
    response = json_response(auth_result_schema.dump(result), status=201)
    return set_auth_cookies(response, result.tokens)


@bp.post("/login")
@timing
def login():
    """Authenticate credentials and set a fresh pair of token cookies."""

    payload = login_schema.load(request.get_json(silent=True) or {})
    result = get_auth_service().login(LoginIn(**payload))
    response = json_response(auth_result_schema.dump(result))
    return set_auth_cookies(response, result.tokens)


@bp.get("/self")
@require_auth
@timing
def whoami():
    """Return the authenticated user profile."""

    user = get_auth_service().whoami(current_claims().user_id)
    return json_response(user_public_schema.dump(user))


@bp.post("/refresh")
@timing
def refresh():
    """Rotate the refresh token cookie and issue a new access token."""

    token = refresh_token_from_request()
    if not token:
        raise Unauthorized("Missing refresh token")
    result = get_auth_service().refresh(token)
    response = json_response(auth_result_schema.dump(result))
    return set_auth_cookies(response, result.tokens)


@bp.post("/logout")
@timing
def logout():
    """Revoke the refresh token (if any) and clear both cookies."""

    get_auth_service().logout(refresh_token_from_request())
    return clear_auth_cookies(Response(status=204))
