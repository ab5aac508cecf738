# auth_service/infra/jwt/token_issuer.py
from __future__ import annotations

import calendar
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from auth_service.core.keys import KeyMaterialProvider
from auth_service.services._shared.errors import SigningError
from auth_service.services._shared.ports import RefreshTokenLedger, TokenIssuer
from auth_service.services.tokens.dto import Claims, LedgerRecord

log = logging.getLogger(__name__)

ACCESS_ALGORITHM = "RS256"
REFRESH_ALGORITHM = "HS256"
DEFAULT_ISSUER = "auth-service"


def _utcnow() -> datetime:
    return datetime.now(UTC)


def refresh_lifetime(now: datetime) -> timedelta:
    """
    Return one calendar year measured from ``now``.

    366 days when the current calendar year is a leap year, else 365.
    """
    return timedelta(days=366 if calendar.isleap(now.year) else 365)


class JWTTokenIssuer(TokenIssuer):
    """
    PyJWT adapter minting RS256 access tokens and HS256 refresh tokens.

    :param keys: Key material loaded at startup.
    :param ledger: Refresh-token ledger used by :meth:`persist_refresh_token`.
    :param issuer: Value of the ``iss`` claim.
    :param access_ttl: Access token lifetime.
    :param clock: Returns the current aware UTC datetime.
    """

    def __init__(
        self,
        keys: KeyMaterialProvider,
        ledger: RefreshTokenLedger,
        *,
        issuer: str = DEFAULT_ISSUER,
        access_ttl: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._keys = keys
        self._ledger = ledger
        self._issuer = issuer
        self._access_ttl = access_ttl
        self._clock = clock

    def _now(self) -> datetime:
        # JWT timestamps are whole seconds; keep the ledger in step with them.
        return self._clock().replace(microsecond=0)

    def _encode(self, payload: dict[str, Any], key: Any, algorithm: str) -> str:
        try:
            return jwt.encode(payload, key, algorithm=algorithm)
        except (jwt.PyJWTError, ValueError, TypeError) as exc:
            raise SigningError(f"Unable to sign {algorithm} token: {exc}") from exc

    # ------------------------------------------------------------------ #
    # Access tokens
    # ------------------------------------------------------------------ #

    def generate_access_token(self, claims: Claims) -> str:
        """
        Sign a short-lived access token.

        :raises KeyUnavailableError: When the private key is missing or malformed.
        """
        now = self._now()
        payload = {
            "sub": claims.subject,
            "role": claims.role.value,
            "iss": self._issuer,
            "iat": int(now.timestamp()),
            "exp": int((now + self._access_ttl).timestamp()),
        }
        return self._encode(payload, self._keys.signing_key(), ACCESS_ALGORITHM)

    # ------------------------------------------------------------------ #
    # Refresh tokens
    # ------------------------------------------------------------------ #

    def persist_refresh_token(self, user_id: int) -> LedgerRecord:
        """
        Create the ledger record a refresh token will reference.

        Storage errors propagate unchanged (``PersistenceError``).
        """
        now = self._now()
        record = self._ledger.create(user_id=user_id, expires_at=now + refresh_lifetime(now))
        log.debug("tokens.ledger_record_created", extra={"ledger_id": record.id})
        return record

    def generate_refresh_token(self, claims: Claims, *, expires_at: datetime) -> str:
        """
        Sign a refresh token bound to a ledger record.

        ``expires_at`` is the record's expiry so the token and the record
        lapse together.

        :raises SigningError: When ``claims`` carries no ledger id.
        :raises KeyUnavailableError: When the refresh secret is not configured.
        """
        if not claims.ledger_id:
            raise SigningError("Refresh token claims require a ledger id")
        now = self._now()
        payload = {
            "sub": claims.subject,
            "role": claims.role.value,
            "jti": claims.ledger_id,
            "iss": self._issuer,
            "iat": int(now.timestamp()),
            "exp": int(expires_at.timestamp()),
        }
        return self._encode(payload, self._keys.refresh_secret(), REFRESH_ALGORITHM)


__all__ = ["JWTTokenIssuer", "refresh_lifetime", "ACCESS_ALGORITHM", "REFRESH_ALGORITHM"]
