# auth_service/infra/jwt/token_verifier.py
from __future__ import annotations

import base64
import binascii
import json
from typing import Any

import jwt
from jwt.exceptions import InvalidJTIError, InvalidSubjectError

from auth_service.core.keys import KeyMaterialProvider
from auth_service.infra.jwt.token_issuer import (
    ACCESS_ALGORITHM,
    DEFAULT_ISSUER,
    REFRESH_ALGORITHM,
)
from auth_service.services._shared.errors import (
    ExpiredTokenError,
    InvalidTokenError,
    MalformedTokenError,
    RevokedTokenError,
)
from auth_service.services._shared.ports import RefreshTokenLedger, TokenVerifier
from auth_service.services.tokens.dto import Claims


def _b64_json(segment: str) -> Any:
    padded = segment + "=" * (-len(segment) % 4)
    return json.loads(base64.urlsafe_b64decode(padded.encode("ascii")))


def _has_readable_body(token: str) -> bool:
    """Return ``True`` when header and payload are base64url-encoded JSON objects."""
    parts = token.split(".")
    if len(parts) != 3:
        return False
    try:
        header = _b64_json(parts[0])
        payload = _b64_json(parts[1])
    except (ValueError, UnicodeError, binascii.Error):
        return False
    return isinstance(header, dict) and isinstance(payload, dict)


class JWTTokenVerifier(TokenVerifier):
    """
    PyJWT adapter validating access and refresh tokens.

    Algorithms are pinned per token kind, so an access token presented as a
    refresh token (or vice versa) fails as :class:`InvalidTokenError`.
    """

    def __init__(
        self,
        keys: KeyMaterialProvider,
        ledger: RefreshTokenLedger,
        *,
        issuer: str = DEFAULT_ISSUER,
    ) -> None:
        self._keys = keys
        self._ledger = ledger
        self._issuer = issuer

    def _decode(self, token: str, key: Any, algorithm: str) -> Claims:
        if not isinstance(token, str) or not token:
            raise MalformedTokenError()
        try:
            payload = jwt.decode(
                token,
                key,
                algorithms=[algorithm],
                issuer=self._issuer,
                options={"require": ["sub", "exp", "iss"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise ExpiredTokenError() from exc
        except jwt.InvalidSignatureError as exc:
            raise InvalidTokenError() from exc
        except jwt.DecodeError as exc:
            # Signature bytes that no longer decode still mean tampering when
            # the rest of the token is intact.
            if _has_readable_body(token):
                raise InvalidTokenError() from exc
            raise MalformedTokenError() from exc
        except (InvalidSubjectError, InvalidJTIError) as exc:
            raise MalformedTokenError(f"Token claims are malformed: {exc}") from exc
        except jwt.MissingRequiredClaimError as exc:
            raise MalformedTokenError(f"Token is missing the '{exc.claim}' claim") from exc
        except jwt.InvalidIssuerError as exc:
            raise InvalidTokenError("Token issuer is not accepted") from exc
        except jwt.InvalidAlgorithmError as exc:
            raise InvalidTokenError("Token algorithm is not accepted") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError() from exc

        try:
            return Claims.from_payload(payload)
        except ValueError as exc:
            raise MalformedTokenError(f"Token claims are malformed: {exc}") from exc

    def verify_access_token(self, token: str) -> Claims:
        """
        Validate an RS256 access token.

        :raises InvalidTokenError: Bad signature, issuer or algorithm.
        :raises ExpiredTokenError: Token past ``exp``.
        :raises MalformedTokenError: Not a JWT or claims of the wrong shape.
        :raises KeyUnavailableError: Key material missing on the server.
        """
        claims = self._decode(token, self._keys.verification_key(), ACCESS_ALGORITHM)
        return claims.without_ledger_id()

    def decode_refresh_token(self, token: str) -> Claims:
        """Validate signature, expiry and issuer of a refresh token without a ledger lookup."""
        claims = self._decode(token, self._keys.refresh_secret(), REFRESH_ALGORITHM)
        if not claims.ledger_id:
            raise MalformedTokenError("Refresh token is missing the 'jti' claim")
        return claims

    def verify_refresh_token(self, token: str) -> Claims:
        """
        Validate a refresh token and confirm its ledger record is still live.

        :raises RevokedTokenError: The ledger holds no unexpired record for ``jti``.
        """
        claims = self.decode_refresh_token(token)
        record = self._ledger.find_by_id(claims.ledger_id or "")
        if record is None:
            raise RevokedTokenError()
        if record.user_id != claims.user_id:
            raise InvalidTokenError("Refresh token does not belong to its ledger record")
        return claims


__all__ = ["JWTTokenVerifier"]
