# auth_service/services/auth/service.py
from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from auth_service.core.constants import Role
from auth_service.models.user import User
from auth_service.services._shared.base import BaseService
from auth_service.services._shared.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    TokenError,
)
from auth_service.services._shared.ports import CredentialVerifier
from auth_service.services.auth.dto import (
    AuthResultOut,
    LoginIn,
    RegisterIn,
    UserPublicOut,
)
from auth_service.services.tokens.dto import Claims
from auth_service.services.tokens.service import TokenLifecycleService

log = logging.getLogger(__name__)


class AuthService(BaseService):
    """
    Account use cases on top of the token lifecycle (register / login /
    refresh / logout / self).

    Tokens are only issued after the user row is committed (register) or the
    credentials are confirmed (login). A failed login writes nothing.
    """

    def __init__(
        self,
        *,
        tokens: TokenLifecycleService,
        credentials: CredentialVerifier,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param tokens: Token lifecycle service (issuer, verifier, ledger).
        :param credentials: Password hash comparator.
        """
        super().__init__()
        self.tokens = tokens
        self.credentials = credentials

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> AuthResultOut:
        """
        Create a ``customer`` account and sign it in.

        :raises ConflictError: If the email is already registered.
        """
        try:
            with self.rw_uow() as uow:
                if uow.users.exists_by_email(dto.email):
                    raise ConflictError("User", "Email is already in use")
                user = User(
                    first_name=dto.first_name,
                    last_name=dto.last_name,
                    email=dto.email,
                    role=Role.CUSTOMER,
                )
                user.password = dto.password
                uow.users.add(user)
                user_id, role = user.id, user.role
        except IntegrityError as exc:
            # Lost a race with a concurrent registration of the same email.
            raise ConflictError("User", "Email is already in use") from exc

        pair = self.tokens.issue_pair(Claims.for_user(user_id, role))
        log.info("auth.registered", extra={"user_id": user_id})
        return AuthResultOut(user_id=user_id, tokens=pair)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> AuthResultOut:
        """
        Authenticate credentials and issue a fresh token pair.

        :raises AuthenticationError: Unknown email or wrong password. No
            token or ledger record exists at that point.
        """
        with self.ro_uow() as uow:
            user = uow.users.get_by_email(dto.email)
            if user is None or not self.credentials.verify(dto.password, user.password_hash):
                log.info("auth.login.failed")
                raise AuthenticationError()
            user_id, role = user.id, user.role

        pair = self.tokens.issue_pair(Claims.for_user(user_id, role))
        log.info("auth.login.succeeded", extra={"user_id": user_id})
        return AuthResultOut(user_id=user_id, tokens=pair)

    # ------------------------------------------------------------------ #
    # Refresh
    # ------------------------------------------------------------------ #

    def refresh(self, refresh_token: str) -> AuthResultOut:
        """
        Rotate a refresh token: new pair first, then the old record goes.

        :raises TokenError: The refresh token is invalid, expired or revoked.
        :raises AuthenticationError: The user no longer exists.
        """
        claims = self.tokens.verify_refresh(refresh_token)
        with self.ro_uow() as uow:
            user = uow.users.get(claims.user_id)
            if user is None:
                raise AuthenticationError()
            user_id, role = user.id, user.role

        pair = self.tokens.rotate_refresh(claims.ledger_id or "", Claims.for_user(user_id, role))
        return AuthResultOut(user_id=user_id, tokens=pair)

    # ------------------------------------------------------------------ #
    # Logout
    # ------------------------------------------------------------------ #

    def logout(self, refresh_token: str | None) -> None:
        """
        Revoke the ledger record behind ``refresh_token``.

        Idempotent: a missing, unreadable or already revoked token is not an
        error, the caller's cookies are cleared either way.
        """
        if not refresh_token:
            return
        try:
            claims = self.tokens.decode_refresh(refresh_token)
        except TokenError as exc:
            log.info("auth.logout.ignored_token", extra={"reason": exc.code})
            return
        self.tokens.revoke(claims.ledger_id or "")
        log.info("auth.logout", extra={"user_id": claims.user_id})

    # ------------------------------------------------------------------ #
    # Self
    # ------------------------------------------------------------------ #

    def whoami(self, user_id: int) -> UserPublicOut:
        """Return the public profile of the authenticated user."""
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return UserPublicOut(
                id=user.id,
                first_name=user.first_name,
                last_name=user.last_name,
                email=user.email,
                role=Role(user.role),
                created_at=user.created_at,
                updated_at=user.updated_at,
            )
