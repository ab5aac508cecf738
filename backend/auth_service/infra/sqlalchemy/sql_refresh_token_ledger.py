# auth_service/infra/sqlalchemy/sql_refresh_token_ledger.py
from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError

from auth_service.models.refresh_token import RefreshToken
from auth_service.services._shared.errors import PersistenceError
from auth_service.services._shared.ports import RefreshTokenLedger
from auth_service.services.tokens.dto import LedgerRecord
from auth_service.uow import SQLAlchemyUnitOfWork


def _parse_id(record_id: str | int) -> int | None:
    text = str(record_id).strip()
    return int(text) if text.isascii() and text.isdigit() else None


class SQLRefreshTokenLedger(RefreshTokenLedger):
    """
    Ledger backed by the ``refresh_tokens`` table.

    Every call runs in its own Unit of Work and commits before returning, so a
    record exists durably before any token referencing it is signed.
    """

    def __init__(
        self,
        *,
        uow_factory: Callable[[], SQLAlchemyUnitOfWork] = SQLAlchemyUnitOfWork,
        clock: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock

    def create(self, *, user_id: int, expires_at: datetime) -> LedgerRecord:
        try:
            with self._uow_factory() as uow:
                row = RefreshToken(user_id=user_id, expires_at=expires_at)
                uow.refresh_tokens.add(row)
                record = LedgerRecord(id=str(row.id), user_id=row.user_id, expires_at=expires_at)
        except SQLAlchemyError as exc:
            raise PersistenceError("Unable to create refresh token record") from exc
        return record

    def delete_by_id(self, record_id: str) -> bool:
        pk = _parse_id(record_id)
        if pk is None:
            return False
        try:
            with self._uow_factory() as uow:
                removed = uow.refresh_tokens.delete_by_id(pk, now=self._clock())
        except SQLAlchemyError as exc:
            raise PersistenceError("Unable to delete refresh token record") from exc
        return removed

    def find_by_id(self, record_id: str) -> LedgerRecord | None:
        pk = _parse_id(record_id)
        if pk is None:
            return None
        try:
            with self._uow_factory() as uow:
                row = uow.refresh_tokens.get_live(pk, now=self._clock())
                record = (
                    None
                    if row is None
                    else LedgerRecord(id=str(row.id), user_id=row.user_id, expires_at=row.expires_at)
                )
        except SQLAlchemyError as exc:
            raise PersistenceError("Unable to read refresh token record") from exc
        return record

    def purge_expired(self, now: datetime) -> int:
        try:
            with self._uow_factory() as uow:
                removed = uow.refresh_tokens.delete_expired(now=now)
        except SQLAlchemyError as exc:
            raise PersistenceError("Unable to purge refresh token records") from exc
        return removed
