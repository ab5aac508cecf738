"""
DTOs for the token lifecycle.

The claims payload is a closed structure: verification converts the decoded
JWT body into :class:`Claims` and rejects anything that does not fit, instead
of handing untyped dictionaries to callers.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any

from auth_service.core.constants import Role


@dataclass(frozen=True, slots=True)
class Claims:
    """
    Identity carried by a token.

    :param subject: String form of the integer user id (``sub`` claim).
    :type subject: str
    :param role: User role (``role`` claim).
    :type role: :class:`~auth_service.core.constants.Role`
    :param ledger_id: Ledger record id (``jti`` claim); refresh tokens only.
    :type ledger_id: str | None
    """

    subject: str
    role: Role
    ledger_id: str | None = None

    @classmethod
    def for_user(cls, user_id: int, role: Role | str) -> Claims:
        """Build access claims for a persisted user."""
        return cls(subject=str(user_id), role=Role(role))

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Claims:
        """
        Type-check a decoded JWT body.

        :raises ValueError: When ``sub``/``role`` are missing or of the wrong type.
        """
        subject = payload.get("sub")
        role = payload.get("role")
        jti = payload.get("jti")
        if not isinstance(subject, str) or not (subject.isascii() and subject.isdigit()):
            raise ValueError("'sub' must be the string form of an integer")
        if not isinstance(role, str):
            raise ValueError("'role' must be a string")
        if jti is not None and not isinstance(jti, str):
            raise ValueError("'jti' must be a string")
        return cls(subject=subject, role=Role(role), ledger_id=jti)

    @property
    def user_id(self) -> int:
        return int(self.subject)

    def with_ledger_id(self, ledger_id: str) -> Claims:
        """Return a copy bound to a ledger record (refresh-token claims)."""
        return replace(self, ledger_id=str(ledger_id))

    def without_ledger_id(self) -> Claims:
        return replace(self, ledger_id=None)


@dataclass(frozen=True, slots=True)
class LedgerRecord:
    """
    Read-model for a refresh-token ledger record.

    :ivar id: Opaque record identifier (embedded as ``jti``).
    :ivar user_id: Owning user id.
    :ivar expires_at: Absolute expiration (UTC).
    """

    id: str
    user_id: int
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class TokenPair:
    """
    Access/refresh pair handed to the transport layer.

    :param access_token: Encoded RS256 access JWT.
    :type access_token: str
    :param refresh_token: Encoded HS256 refresh JWT.
    :type refresh_token: str
    :param ledger_id: Ledger record backing ``refresh_token``.
    :type ledger_id: str
    :param refresh_expires_at: Expiry shared by the ledger record and the refresh JWT.
    :type refresh_expires_at: datetime
    """

    access_token: str
    refresh_token: str
    ledger_id: str
    refresh_expires_at: datetime
