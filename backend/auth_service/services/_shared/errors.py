"""
Domain-level exceptions used within the service layer.

These exceptions are **framework-agnostic** and should never import or depend
on Flask, HTTP, or SQLAlchemy directly. They serve as stable contracts between
the ledger adapters, the token issuer/verifier and the application services.

The translation to HTTP responses (RFC 7807) is handled by
``auth_service/core/errors.py`` via ``BaseService.translate_exceptions()``.
"""

from __future__ import annotations

from dataclasses import dataclass

# --------------------------------------------------------------------------- #
# Base types
# --------------------------------------------------------------------------- #


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Notes
    -----
    - These are *not* HTTP errors.
    - The API layer translates them to ``APIError`` via ``BaseService``.
    """

    pass


# --------------------------------------------------------------------------- #
# Identity / persistence errors
# --------------------------------------------------------------------------- #


class AuthenticationError(ServiceError):
    """
    Raised when credentials do not match.

    The message is deliberately generic: it never tells whether the email
    exists or the password was wrong.
    """

    def __init__(self, message: str = "Email or password does not match") -> None:
        super().__init__(message)


@dataclass(slots=True)
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found in the repository.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    entity: str
    key: str | int

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.entity} not found: {self.key}"


@dataclass(slots=True)
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    entity: str
    detail: str

    def __str__(self) -> str:  # pragma: no cover
        return f"Conflict on {self.entity}: {self.detail}"


class PersistenceError(ServiceError):
    """
    Raised when the refresh-token ledger (or another store) fails to read or write.

    Adapters wrap driver exceptions (SQLAlchemy, Redis) with ``raise ... from``
    so operators keep the root cause while clients only see a generic 500.
    """


# --------------------------------------------------------------------------- #
# Signing errors (server misconfiguration)
# --------------------------------------------------------------------------- #


class SigningError(ServiceError):
    """Raised when a token cannot be signed."""


class KeyUnavailableError(SigningError):
    """Raised when the private key or the refresh secret is missing or malformed."""


# --------------------------------------------------------------------------- #
# Verification errors (always recoverable by the caller)
# --------------------------------------------------------------------------- #


class TokenError(ServiceError):
    """Base class for token verification failures."""

    code = "invalid_token"
    default_message = "Token is invalid"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class InvalidTokenError(TokenError):
    """Signature, issuer or algorithm check failed. Reject outright."""

    code = "invalid_token"
    default_message = "Token signature is invalid"


class MalformedTokenError(TokenError):
    """The token is not a JWT or its claims have the wrong shape."""

    code = "malformed_token"
    default_message = "Token is malformed"


class ExpiredTokenError(TokenError):
    """The token is past its ``exp``; refresh (or re-authenticate) and retry."""

    code = "token_expired"
    default_message = "Token has expired"


class RevokedTokenError(TokenError):
    """
    The refresh token is correctly signed but its ledger record is gone.

    Covers explicit logout and supersession by rotation. Refreshing again will
    not help: the caller must sign in.
    """

    code = "token_revoked"
    default_message = "Token has been revoked"
