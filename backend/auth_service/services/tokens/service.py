# auth_service/services/tokens/service.py
from __future__ import annotations

import logging

from auth_service.services._shared.errors import (
    PersistenceError,
    RevokedTokenError,
    SigningError,
)
from auth_service.services._shared.ports import (
    RefreshTokenLedger,
    TokenIssuer,
    TokenVerifier,
)
from auth_service.services.tokens.dto import Claims, TokenPair

log = logging.getLogger(__name__)


class TokenLifecycleService:
    """
    Issue, verify, rotate and revoke session token pairs.

    State per ledger record: **Active** (issued) → **Rotated** (superseded on
    refresh) or **Revoked** (logout). Natural expiry is terminal and behaves as
    if the record were absent.

    Ordering guarantees
    -------------------
    - A ledger record is durably created before the refresh token naming it
      is signed.
    - On rotation the old record is deleted only after the new pair exists.
    - Two concurrent rotations of the same token cannot both succeed: the one
      that fails to delete the old record discards its new record and raises
      :class:`RevokedTokenError`.
    """

    def __init__(
        self,
        *,
        issuer: TokenIssuer,
        verifier: TokenVerifier,
        ledger: RefreshTokenLedger,
    ) -> None:
        self.issuer = issuer
        self.verifier = verifier
        self.ledger = ledger

    # ------------------------------------------------------------------ #
    # Issue
    # ------------------------------------------------------------------ #

    def issue_pair(self, claims: Claims) -> TokenPair:
        """
        Mint an access token, a ledger record and a refresh token naming it.

        :param claims: Identity to embed (any ``ledger_id`` is ignored).
        :returns: The complete pair; never a partial one.
        :raises SigningError: When key material is missing or malformed.
        :raises PersistenceError: When the ledger cannot be written.
        """
        claims = claims.without_ledger_id()
        access = self.issuer.generate_access_token(claims)
        record = self.issuer.persist_refresh_token(claims.user_id)
        try:
            refresh = self.issuer.generate_refresh_token(
                claims.with_ledger_id(record.id),
                expires_at=record.expires_at,
            )
        except SigningError:
            self._discard(record.id)
            raise

        log.info("tokens.issued", extra={"user_id": claims.user_id, "ledger_id": record.id})
        return TokenPair(
            access_token=access,
            refresh_token=refresh,
            ledger_id=record.id,
            refresh_expires_at=record.expires_at,
        )

    # ------------------------------------------------------------------ #
    # Verify
    # ------------------------------------------------------------------ #

    def verify_access(self, token: str) -> Claims:
        return self.verifier.verify_access_token(token)

    def verify_refresh(self, token: str) -> Claims:
        """Validate a refresh token including its ledger record; ``ledger_id`` is set."""
        return self.verifier.verify_refresh_token(token)

    def decode_refresh(self, token: str) -> Claims:
        """Validate a refresh token without consulting the ledger."""
        return self.verifier.decode_refresh_token(token)

    # ------------------------------------------------------------------ #
    # Rotate / revoke
    # ------------------------------------------------------------------ #

    def rotate_refresh(self, old_ledger_id: str, claims: Claims) -> TokenPair:
        """
        Issue a new pair, then delete the record of the presented refresh token.

        :param old_ledger_id: Ledger id from the verified refresh token.
        :param claims: Identity for the new pair.
        :raises RevokedTokenError: The old record was consumed concurrently.
        """
        pair = self.issue_pair(claims)
        if not self.ledger.delete_by_id(old_ledger_id):
            self._discard(pair.ledger_id)
            log.warning(
                "tokens.rotation_lost_race",
                extra={"user_id": claims.user_id, "ledger_id": old_ledger_id},
            )
            raise RevokedTokenError()

        log.info(
            "tokens.rotated",
            extra={"user_id": claims.user_id, "ledger_id": pair.ledger_id},
        )
        return pair

    def revoke(self, ledger_id: str) -> None:
        """Delete the ledger record; a missing record is not an error."""
        removed = self.ledger.delete_by_id(ledger_id)
        log.info("tokens.revoked", extra={"ledger_id": ledger_id, "removed": removed})

    def _discard(self, ledger_id: str) -> None:
        try:
            self.ledger.delete_by_id(ledger_id)
        except PersistenceError:
            # The record lapses on its own at expiry.
            log.warning("tokens.discard_failed", extra={"ledger_id": ledger_id}, exc_info=True)
