"""CORS policy for the cookie-based auth API."""

from __future__ import annotations

from flask import Flask
from flask_cors import CORS

from auth_service.core.logger import REQUEST_ID_HEADER


def init_app(app: Flask) -> None:
    """Configure CORS for ``/api/*`` from ``CORS_ORIGINS``.

    Browsers only send the ``accessToken``/``refreshToken`` cookies across
    origins when credentials are allowed, which CORS forbids for a wildcard
    origin. An empty or ``"*"`` setting therefore serves any origin but
    without credentials; list explicit origins to enable cookie transport.
    """
    raw_origins = app.config.get("CORS_ORIGINS", "")
    origins = [o.strip() for o in raw_origins.split(",") if o.strip()]
    wildcard = len(origins) == 0 or origins == ["*"]

    CORS(
        app,
        resources={r"/api/*": {"origins": "*" if wildcard else origins}},
        supports_credentials=not wildcard,
        allow_headers=["Content-Type", "Authorization", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
        max_age=app.config.get("CORS_MAX_AGE", 600),
    )
