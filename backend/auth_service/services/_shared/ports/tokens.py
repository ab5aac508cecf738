from __future__ import annotations

from datetime import datetime
from typing import Protocol

from auth_service.services.tokens.dto import Claims, LedgerRecord


class TokenIssuer(Protocol):
    """Port for minting access and refresh tokens."""

    def generate_access_token(self, claims: Claims) -> str: ...

    def persist_refresh_token(self, user_id: int) -> LedgerRecord: ...

    def generate_refresh_token(self, claims: Claims, *, expires_at: datetime) -> str: ...


class TokenVerifier(Protocol):
    """Port for validating presented tokens."""

    def verify_access_token(self, token: str) -> Claims: ...

    def decode_refresh_token(self, token: str) -> Claims: ...

    def verify_refresh_token(self, token: str) -> Claims: ...
