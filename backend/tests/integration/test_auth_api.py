"""End-to-end tests for the ``/api/v1/auth`` endpoints."""

from __future__ import annotations

from datetime import timedelta

import pytest

from auth_service.core.constants import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE
from auth_service.infra.jwt.token_issuer import ACCESS_ALGORITHM
from auth_service.models import RefreshToken
from tests.factories.user import DEFAULT_PASSWORD, UserFactory
from tests.helpers.tokens import flip_signature_char, forge_token

BASE = "/api/v1/auth"


def _cookie_headers(resp, name: str) -> list[str]:
    return [h for h in resp.headers.getlist("Set-Cookie") if h.startswith(f"{name}=")]


def _cookie_value(client, name: str) -> str | None:
    cookie = client.get_cookie(name)
    return cookie.value if cookie else None


@pytest.fixture()
def user(session):
    u = UserFactory(email="jane@example.com", first_name="Jane", last_name="Doe")
    session.commit()
    return u


@pytest.fixture()
def logged_in(client, user):
    resp = client.post(f"{BASE}/login", json={"email": user.email, "password": DEFAULT_PASSWORD})
    assert resp.status_code == 200
    return client


# ------------------------------- Register --------------------------------- #
def test_register_creates_user_and_sets_cookies(client, session):
    resp = client.post(
        f"{BASE}/register",
        json={
            "firstName": " Ana ",
            "lastName": "Diaz",
            "email": "ana@example.com",
            "password": "secret123",
        },
    )

    assert resp.status_code == 201
    assert isinstance(resp.get_json()["id"], int)
    for name in (ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE):
        (header,) = _cookie_headers(resp, name)
        assert "HttpOnly" in header
        assert "SameSite=Strict" in header
        assert "Path=/" in header
    assert session.query(RefreshToken).count() == 1

    me = client.get(f"{BASE}/self")
    assert me.status_code == 200
    assert me.get_json()["firstName"] == "Ana"


def test_register_duplicate_email(client, user):
    resp = client.post(
        f"{BASE}/register",
        json={"firstName": "J", "lastName": "D", "email": user.email, "password": "secret123"},
    )

    assert resp.status_code == 400
    assert resp.get_json()["code"] == "conflict"
    assert not _cookie_headers(resp, ACCESS_TOKEN_COOKIE)


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"firstName": "A", "lastName": "B", "email": "not-an-email", "password": "secret123"},
        {"firstName": "A", "lastName": "B", "email": "a@example.com", "password": "short"},
        {"firstName": "  ", "lastName": "B", "email": "a@example.com", "password": "secret123"},
    ],
)
def test_register_validation_errors(client, payload):
    resp = client.post(f"{BASE}/register", json=payload)

    assert resp.status_code == 422
    assert resp.mimetype == "application/problem+json"
    body = resp.get_json()
    assert body["code"] == "validation_error"
    assert body["details"]["errors"]


# --------------------------------- Login ---------------------------------- #
def test_login_sets_cookies(client, user):
    resp = client.post(f"{BASE}/login", json={"email": "JANE@example.com", "password": DEFAULT_PASSWORD})

    assert resp.status_code == 200
    assert resp.get_json() == {"id": user.id}
    assert _cookie_value(client, ACCESS_TOKEN_COOKIE)
    assert _cookie_value(client, REFRESH_TOKEN_COOKIE)


def test_login_bad_credentials(client, user, session):
    resp = client.post(f"{BASE}/login", json={"email": user.email, "password": "nope-nope"})

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["code"] == "invalid_credentials"
    assert body["detail"] == "Email or password does not match"
    assert session.query(RefreshToken).count() == 0
    assert not resp.headers.getlist("Set-Cookie")


# --------------------------------- Self ----------------------------------- #
def test_self_with_cookie(logged_in, user):
    resp = logged_in.get(f"{BASE}/self")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["id"] == user.id
    assert body["email"] == "jane@example.com"
    assert body["role"] == "customer"
    assert "password" not in body
    assert "passwordHash" not in body


def test_self_with_bearer_header(app, logged_in, user):
    token = _cookie_value(logged_in, ACCESS_TOKEN_COOKIE)
    fresh = app.test_client()

    resp = fresh.get(f"{BASE}/self", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 200
    assert resp.get_json()["id"] == user.id


def test_self_without_token(client):
    resp = client.get(f"{BASE}/self")

    assert resp.status_code == 401
    assert resp.mimetype == "application/problem+json"
    assert resp.get_json()["code"] == "unauthorized"


def test_self_with_tampered_token(logged_in):
    token = _cookie_value(logged_in, ACCESS_TOKEN_COOKIE)
    logged_in.set_cookie(ACCESS_TOKEN_COOKIE, flip_signature_char(token))

    resp = logged_in.get(f"{BASE}/self")

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "invalid_token"


def test_self_with_expired_token(app, keys, user):
    token = forge_token(
        keys.signing_key(),
        algorithm=ACCESS_ALGORITHM,
        lifetime=timedelta(seconds=-30),
        sub=str(user.id),
        role="customer",
    )

    resp = app.test_client().get(f"{BASE}/self", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "token_expired"


def test_self_with_garbage_token(app):
    resp = app.test_client().get(f"{BASE}/self", headers={"Authorization": "Bearer garbage"})

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "malformed_token"


# -------------------------------- Refresh --------------------------------- #
def test_refresh_rotates_cookie_and_revokes_old(logged_in, session):
    old_refresh = _cookie_value(logged_in, REFRESH_TOKEN_COOKIE)

    resp = logged_in.post(f"{BASE}/refresh")

    assert resp.status_code == 200
    new_refresh = _cookie_value(logged_in, REFRESH_TOKEN_COOKIE)
    assert new_refresh and new_refresh != old_refresh
    assert session.query(RefreshToken).count() == 1

    logged_in.set_cookie(REFRESH_TOKEN_COOKIE, old_refresh)
    replay = logged_in.post(f"{BASE}/refresh")
    assert replay.status_code == 401
    assert replay.get_json()["code"] == "token_revoked"


def test_refresh_without_cookie(client):
    resp = client.post(f"{BASE}/refresh")

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "unauthorized"


def test_refresh_rejects_access_token(logged_in):
    access = _cookie_value(logged_in, ACCESS_TOKEN_COOKIE)
    logged_in.set_cookie(REFRESH_TOKEN_COOKIE, access)

    resp = logged_in.post(f"{BASE}/refresh")

    assert resp.status_code == 401
    assert resp.get_json()["code"] == "invalid_token"


# -------------------------------- Logout ---------------------------------- #
def test_logout_revokes_and_clears_cookies(logged_in, session):
    old_refresh = _cookie_value(logged_in, REFRESH_TOKEN_COOKIE)

    resp = logged_in.post(f"{BASE}/logout")

    assert resp.status_code == 204
    assert _cookie_headers(resp, ACCESS_TOKEN_COOKIE)
    assert _cookie_headers(resp, REFRESH_TOKEN_COOKIE)
    assert _cookie_value(logged_in, REFRESH_TOKEN_COOKIE) is None
    assert session.query(RefreshToken).count() == 0

    logged_in.set_cookie(REFRESH_TOKEN_COOKIE, old_refresh)
    assert logged_in.post(f"{BASE}/refresh").get_json()["code"] == "token_revoked"


def test_logout_without_session_is_noop(client):
    assert client.post(f"{BASE}/logout").status_code == 204


def test_logout_with_garbage_cookie(client):
    client.set_cookie(REFRESH_TOKEN_COOKIE, "not-a-jwt")

    resp = client.post(f"{BASE}/logout")

    assert resp.status_code == 204
    assert _cookie_value(client, REFRESH_TOKEN_COOKIE) is None


# ------------------------------ Cross-cutting ----------------------------- #
def test_request_id_is_echoed(client):
    resp = client.get(f"{BASE}/self", headers={"X-Request-ID": "abc-123"})

    assert resp.headers["X-Request-ID"] == "abc-123"
    assert resp.get_json()["request_id"] == "abc-123"


def test_unknown_route_is_problem_json(client):
    resp = client.get("/api/v1/nope")

    assert resp.status_code == 404
    assert resp.mimetype == "application/problem+json"
    assert resp.get_json()["code"] == "not_found"
