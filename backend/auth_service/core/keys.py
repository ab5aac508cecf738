"""Key material for token signing, loaded once at startup.

The provider is built by the app factory from configuration and injected into
the token issuer and verifier. Loading never raises: a missing or malformed
key is remembered and reported as :class:`KeyUnavailableError` when a request
actually needs it, so the failure is logged per request as a 500 instead of
preventing unrelated endpoints (health) from serving.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric.rsa import RSAPrivateKey, RSAPublicKey

from auth_service.services._shared.errors import KeyUnavailableError

log = logging.getLogger(__name__)


class KeyMaterialProvider:
    """
    Read-only holder of the RSA key pair and the refresh-token secret.

    :param private_key_pem: RSA private key in PEM format (``None`` when unavailable).
    :param refresh_secret: Shared secret for HS256 refresh tokens.
    :param source: Human-readable origin of the private key, used in error messages.
    """

    def __init__(
        self,
        *,
        private_key_pem: bytes | None,
        refresh_secret: str | None,
        source: str = "<memory>",
    ) -> None:
        self._source = source
        self._private_key: RSAPrivateKey | None = None
        self._key_error: str | None = None
        self._refresh_secret = refresh_secret or None

        if private_key_pem is None:
            self._key_error = f"Private key not found ({source})"
        else:
            try:
                key = serialization.load_pem_private_key(private_key_pem, password=None)
            except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
                self._key_error = f"Private key at {source} is malformed: {exc}"
            else:
                if isinstance(key, RSAPrivateKey):
                    self._private_key = key
                else:
                    self._key_error = f"Private key at {source} is not an RSA key"

        if self._key_error:
            log.warning("keys.private_key_unavailable: %s", self._key_error)
        if self._refresh_secret is None:
            log.warning("keys.refresh_secret_unavailable")

    # ------------------------------------------------------------------ #
    # Construction
    # ------------------------------------------------------------------ #

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> KeyMaterialProvider:
        """
        Build the provider from Flask config.

        ``JWT_PRIVATE_KEY`` (PEM text) wins over ``JWT_PRIVATE_KEY_PATH``.
        """
        pem_text = config.get("JWT_PRIVATE_KEY")
        secret = config.get("REFRESH_TOKEN_SECRET")
        if pem_text:
            return cls(
                private_key_pem=str(pem_text).encode("utf-8"),
                refresh_secret=secret,
                source="JWT_PRIVATE_KEY",
            )

        path = Path(str(config.get("JWT_PRIVATE_KEY_PATH") or "certs/private.pem"))
        try:
            pem = path.read_bytes()
        except OSError:
            pem = None
        return cls(private_key_pem=pem, refresh_secret=secret, source=str(path))

    # ------------------------------------------------------------------ #
    # Accessors
    # ------------------------------------------------------------------ #

    def signing_key(self) -> RSAPrivateKey:
        """Return the RSA private key used for RS256 access tokens."""
        if self._private_key is None:
            raise KeyUnavailableError(self._key_error or "Private key unavailable")
        return self._private_key

    def verification_key(self) -> RSAPublicKey:
        """Return the public counterpart of :meth:`signing_key`."""
        return self.signing_key().public_key()

    def refresh_secret(self) -> str:
        """Return the HS256 secret used for refresh tokens."""
        if self._refresh_secret is None:
            raise KeyUnavailableError("Refresh token secret is not configured")
        return self._refresh_secret


def generate_private_key_pem(key_size: int = 2048) -> bytes:
    """Generate a fresh RSA private key serialised as unencrypted PKCS#8 PEM."""
    from cryptography.hazmat.primitives.asymmetric import rsa

    key = rsa.generate_private_key(public_exponent=65537, key_size=key_size)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )


def public_key_pem(private_key_pem: bytes) -> bytes:
    """Derive the SubjectPublicKeyInfo PEM for a private key PEM."""
    key = serialization.load_pem_private_key(private_key_pem, password=None)
    return key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )


__all__ = ["KeyMaterialProvider", "generate_private_key_pem", "public_key_pem"]
