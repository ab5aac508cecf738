# auth_service/services/_shared/base.py
from __future__ import annotations

from http import HTTPStatus

from auth_service.core import errors as api_errors
from auth_service.services._shared.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PersistenceError,
    ServiceError,
    SigningError,
    TokenError,
)
from auth_service.uow.sqlalchemy_uow import (
    SQLAlchemyReadOnlyUnitOfWork,
    SQLAlchemyUnitOfWork,
)


class BaseService:
    """
    Base class for application services.

    Responsibilities
    ----------------
    * Provide helpers to run read-only and read-write units of work.
    * Centralize domain -> HTTP error translation.

    Notes
    -----
    - Services must never touch the global session; always use a Unit of Work.
    """

    DEFAULT_READ_ISOLATION = "READ COMMITTED"

    # -------------------------- UoW helpers ---------------------------------

    def rw_uow(self) -> SQLAlchemyUnitOfWork:
        """
        Create a read-write Unit of Work.

        :returns: Read-write UoW instance.
        :rtype: SQLAlchemyUnitOfWork
        """
        return SQLAlchemyUnitOfWork()

    def ro_uow(self, *, isolation: str | None = None) -> SQLAlchemyReadOnlyUnitOfWork:
        """
        Create a read-only Unit of Work.

        :param isolation: Transaction isolation level hint.
        :type isolation: str | None
        :returns: Read-only UoW instance.
        :rtype: SQLAlchemyReadOnlyUnitOfWork
        """
        return SQLAlchemyReadOnlyUnitOfWork(
            isolation_level=isolation or self.DEFAULT_READ_ISOLATION,
        )

    # -------------------------- Error handling ------------------------------

    @staticmethod
    def translate_exceptions(exc: Exception) -> Exception:
        """
        Map domain/service-level errors to API-level (HTTP) errors.

        Server-side failures (signing, persistence) are translated to a generic
        500 so no key paths, driver messages or SQL leak to clients.

        :param exc: Exception raised within the service.
        :type exc: Exception
        :returns: Translated exception ready to be re-raised.
        :rtype: Exception
        """
        if isinstance(exc, TokenError):
            # → 401, with a code telling the client whether refreshing helps
            return api_errors.Unauthorized(str(exc), code=exc.code)

        if isinstance(exc, AuthenticationError):
            # → 400 Bad Request (original contract for bad credentials)
            return api_errors.APIError(
                message=str(exc),
                status_code=HTTPStatus.BAD_REQUEST,
                code="invalid_credentials",
            )

        if isinstance(exc, ConflictError):
            return api_errors.APIError(
                message=exc.detail,
                status_code=HTTPStatus.BAD_REQUEST,
                code="conflict",
            )

        if isinstance(exc, NotFoundError):
            return api_errors.NotFound(str(exc))

        if isinstance(exc, SigningError | PersistenceError):
            return api_errors.APIError(
                message="Unexpected error",
                status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
                code="internal_server_error",
            )

        # Any other ServiceError subclass → 400 Bad Request
        if isinstance(exc, ServiceError):
            return api_errors.APIError(
                message=str(exc),
                status_code=HTTPStatus.BAD_REQUEST,
                code="bad_request",
            )

        # Fallback: return untouched (will bubble up to Flask handler)
        return exc
