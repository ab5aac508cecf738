"""
Units of Work over the Flask-SQLAlchemy scoped session.

The SQL refresh-token ledger opens a :class:`SQLAlchemyUnitOfWork` per call,
so every ledger mutation is its own committed transaction. Services read
users through :class:`SQLAlchemyReadOnlyUnitOfWork`.
"""

from __future__ import annotations

from contextlib import suppress

from flask import current_app
from sqlalchemy import event, text
from sqlalchemy.exc import InvalidRequestError, SQLAlchemyError
from sqlalchemy.orm import Session, SessionTransaction

from auth_service.core.extensions import db
from auth_service.repositories import (
    RefreshTokenRepository,
    TenantRepository,
    UserRepository,
)
from auth_service.uow.base import UnitOfWork


class _Repositories:
    """Repositories bound to one session."""

    def __init__(self, *, session: Session) -> None:
        self.session = session
        self.users = UserRepository(session=session)
        self.refresh_tokens = RefreshTokenRepository(session=session)
        self.tenants = TenantRepository(session=session)


class SQLAlchemyUnitOfWork(_Repositories, UnitOfWork):
    """Read-write scope: commit when the block succeeds, roll back otherwise."""

    def __init__(self) -> None:
        super().__init__(session=db.session)

    def __enter__(self) -> SQLAlchemyUnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()
            return
        try:
            self.commit()
        except Exception:
            self.rollback()
            raise

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


class SQLAlchemyReadOnlyUnitOfWork(_Repositories, UnitOfWork):
    """
    Read-only scope.

    Starts its own transaction when the session is idle (setting the isolation
    level where the dialect allows it) and joins the running one otherwise.
    Any ORM flush attempted inside the block raises, and ``commit()`` is
    refused outright.
    """

    _ISOLATION_DIALECTS = frozenset({"postgresql", "mysql", "mariadb"})

    def __init__(self, *, isolation_level: str | None = "READ COMMITTED") -> None:
        super().__init__(session=db.session)
        self.isolation_level = isolation_level
        self._owned: SessionTransaction | None = None

    def __enter__(self) -> SQLAlchemyReadOnlyUnitOfWork:
        self._owned = None
        try:
            owned = self.session.begin()
        except InvalidRequestError:
            owned = None  # already inside a transaction
        if owned is not None:
            owned.__enter__()
            self._owned = owned
            self._apply_isolation()

        event.listen(self.session, "before_flush", self._refuse_flush)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            owned, self._owned = self._owned, None
            if owned is not None:
                with suppress(Exception):
                    self.session.rollback()
                owned.__exit__(exc_type, exc, tb)
        finally:
            with suppress(InvalidRequestError):
                event.remove(self.session, "before_flush", self._refuse_flush)

    def _apply_isolation(self) -> None:
        if not self.isolation_level:
            return
        if self.session.connection().dialect.name not in self._ISOLATION_DIALECTS:
            return
        level = self.isolation_level.upper().strip()
        try:
            self.session.execute(text(f"SET TRANSACTION ISOLATION LEVEL {level}"))
        except SQLAlchemyError as exc:
            current_app.logger.warning("uow.isolation_failed: %s", exc)

    def commit(self) -> None:
        """
        Refuse to commit.

        :raises RuntimeError: Always; this scope never writes.
        """
        raise RuntimeError("Read-only UnitOfWork does not allow commit().")

    def rollback(self) -> None:
        self.session.rollback()

    @staticmethod
    def _refuse_flush(session, flush_context, instances) -> None:
        if session.new or session.dirty or session.deleted:
            raise RuntimeError("Read-only UnitOfWork: ORM flush blocked.")
