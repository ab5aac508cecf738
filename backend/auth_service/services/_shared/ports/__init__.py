"""
auth_service.services._shared.ports
===================================

Collection of *ports* (hexagonal interfaces) that define the contracts
for token management and credential checking.

These ports decouple the service layer from concrete implementations
of token signing, the refresh-token ledger, and password hashing.

Modules
-------
- :mod:`tokens`:
    Defines :class:`~.TokenIssuer` and :class:`~.TokenVerifier`.

- :mod:`refresh_token_ledger`:
    Defines :class:`~.RefreshTokenLedger` and the
    :class:`~.InMemoryRefreshTokenLedger` double used by unit tests.

- :mod:`credential_verifier`:
    Defines :class:`~.CredentialVerifier`.

Design Notes
------------
Concrete adapters (SQLAlchemy, Redis, PyJWT, werkzeug) live under
``auth_service.infra``.
"""

from __future__ import annotations

from .credential_verifier import CredentialVerifier
from .refresh_token_ledger import InMemoryRefreshTokenLedger, RefreshTokenLedger
from .tokens import TokenIssuer, TokenVerifier

__all__ = [
    "CredentialVerifier",
    "InMemoryRefreshTokenLedger",
    "RefreshTokenLedger",
    "TokenIssuer",
    "TokenVerifier",
]
