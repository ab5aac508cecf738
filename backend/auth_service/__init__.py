"""Auth service: session token lifecycle behind a Flask API.

``from auth_service import create_app`` is the supported entry point for
WSGI servers and the ``flask`` CLI.
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
