"""Refresh-token ledger rows (one per outstanding refresh token)."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from auth_service.core.extensions import db

from .base import PKMixin, TimestampMixin, UTCDateTime

if TYPE_CHECKING:
    from .user import User


class RefreshToken(PKMixin, TimestampMixin, db.Model):
    """
    Ledger record backing a refresh token.

    The token itself is never stored: its ``jti`` claim carries this row's
    ``id``. Deleting the row revokes the token.
    """

    __tablename__ = "refresh_tokens"

    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)

    user: Mapped[User] = relationship(back_populates="refresh_tokens")

    __table_args__ = (
        Index("ix_refresh_tokens_user_id", "user_id"),
        Index("ix_refresh_tokens_expires_at", "expires_at"),
    )
