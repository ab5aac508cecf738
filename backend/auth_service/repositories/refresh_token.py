"""Repository for refresh-token ledger rows."""

from __future__ import annotations

from datetime import datetime
from typing import cast

from sqlalchemy import delete, func, select

from auth_service.models.refresh_token import RefreshToken
from auth_service.repositories.base import BaseRepository


class RefreshTokenRepository(BaseRepository[RefreshToken]):
    """Persistence-only access to :class:`RefreshToken` rows."""

    model = RefreshToken

    def get_live(self, record_id: int, *, now: datetime) -> RefreshToken | None:
        """Return the row when it exists and ``expires_at`` is after ``now``."""
        stmt = select(RefreshToken).where(
            RefreshToken.id == record_id,
            RefreshToken.expires_at > now,
        )
        return cast(RefreshToken | None, self.session.execute(stmt).scalars().first())

    def delete_by_id(self, record_id: int, *, now: datetime) -> bool:
        """
        Delete a row by id with a single ``DELETE`` statement.

        :returns: ``True`` when the deleted row was still live (unexpired).
        """
        live = self.session.execute(
            delete(RefreshToken)
            .where(RefreshToken.id == record_id, RefreshToken.expires_at > now)
            .execution_options(synchronize_session=False)
        ).rowcount
        if live:
            return True
        # Expired leftovers are removed too but do not count as a revocation.
        self.session.execute(
            delete(RefreshToken)
            .where(RefreshToken.id == record_id)
            .execution_options(synchronize_session=False)
        )
        return False

    def delete_expired(self, *, now: datetime) -> int:
        """Delete every row whose ``expires_at`` is not after ``now``."""
        result = self.session.execute(
            delete(RefreshToken)
            .where(RefreshToken.expires_at <= now)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

    def count_for_user(self, user_id: int) -> int:
        """Return how many ledger rows (live or not) belong to ``user_id``."""
        stmt = select(func.count()).select_from(RefreshToken).where(RefreshToken.user_id == user_id)
        return int(self.session.execute(stmt).scalar_one())
