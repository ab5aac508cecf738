from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from auth_service.services.tokens.dto import LedgerRecord


class RefreshTokenLedger(Protocol):
    """
    Persisted store of outstanding refresh tokens (the revocation mechanism).

    A refresh token is valid only while the record whose id it embeds exists
    and is unexpired. Implementations MUST:

    - make ``create`` durable before returning (the caller signs a token
      referencing the id right after);
    - keep ``delete_by_id`` idempotent;
    - never return an expired record from ``find_by_id``.
    """

    def create(self, *, user_id: int, expires_at: datetime) -> LedgerRecord:
        """Insert a record and return it with its generated id."""

    def delete_by_id(self, record_id: str) -> bool:
        """Remove a record. :returns: True if a live record was removed."""

    def find_by_id(self, record_id: str) -> LedgerRecord | None:
        """Return the record, or ``None`` when absent or expired."""

    def purge_expired(self, now: datetime) -> int:
        """Delete records whose ``expires_at`` is not after ``now``. :returns: rows removed."""


@dataclass(slots=True)
class _Entry:
    user_id: int
    expires_at: datetime


class InMemoryRefreshTokenLedger(RefreshTokenLedger):
    """
    In-memory ledger used in unit tests.

    .. note::
       Uses a threading lock so concurrent rotation tests see atomic deletes.
    """

    def __init__(self) -> None:
        self._by_id: dict[str, _Entry] = {}
        self._seq = 0
        self._lock = threading.Lock()

    @staticmethod
    def _now() -> datetime:
        return datetime.now(UTC)

    def create(self, *, user_id: int, expires_at: datetime) -> LedgerRecord:
        with self._lock:
            self._seq += 1
            record_id = str(self._seq)
            self._by_id[record_id] = _Entry(user_id=user_id, expires_at=expires_at)
        return LedgerRecord(id=record_id, user_id=user_id, expires_at=expires_at)

    def delete_by_id(self, record_id: str) -> bool:
        with self._lock:
            entry = self._by_id.pop(str(record_id), None)
        return entry is not None and entry.expires_at > self._now()

    def find_by_id(self, record_id: str) -> LedgerRecord | None:
        entry = self._by_id.get(str(record_id))
        if entry is None or entry.expires_at <= self._now():
            return None
        return LedgerRecord(id=str(record_id), user_id=entry.user_id, expires_at=entry.expires_at)

    def purge_expired(self, now: datetime) -> int:
        with self._lock:
            stale = [k for k, v in self._by_id.items() if v.expires_at <= now]
            for k in stale:
                del self._by_id[k]
        return len(stale)

    def __len__(self) -> int:
        return len(self._by_id)
