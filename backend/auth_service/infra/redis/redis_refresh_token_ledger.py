# comments in English; reST docstrings
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import cast

import redis  # type: ignore[import-untyped]

from auth_service.services._shared.errors import PersistenceError
from auth_service.services._shared.ports import RefreshTokenLedger
from auth_service.services.tokens.dto import LedgerRecord


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(slots=True)
class RedisRefreshTokenLedger(RefreshTokenLedger):
    """
    Redis-backed refresh-token ledger.

    Each record is a hash ``rt:{id}`` holding ``user_id`` and ``expires_at``
    (epoch seconds). The key expires at the record's ``expires_at`` so Redis
    performs the expiry sweep itself; reads still compare against the clock.
    Ids come from an ``INCR`` on ``rt:seq``.

    :param r: A Redis client (already connected).
    :param clock: Returns the current aware UTC datetime.
    """

    r: redis.Redis
    clock: Callable[[], datetime] = field(default=_utcnow)

    SEQ_KEY = "rt:seq"

    # -------------------- helpers --------------------

    @staticmethod
    def _k(record_id: str) -> str:
        return f"rt:{record_id}"

    @staticmethod
    def _to_ts(dt: datetime) -> int:
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=UTC)
        return int(dt.timestamp())

    @staticmethod
    def _b(value: bytes | str | None, default: str = "") -> str:
        if value is None:
            return default
        return value.decode() if isinstance(value, bytes | bytearray) else str(value)

    @staticmethod
    def _valid_id(record_id: str) -> bool:
        text = str(record_id)
        return text.isascii() and text.isdigit()

    # -------------------- API ------------------------

    def create(self, *, user_id: int, expires_at: datetime) -> LedgerRecord:
        """
        Insert a record and set its expiry in one transaction.

        The record is visible to every worker once ``EXEC`` returns.
        """
        exp_ts = self._to_ts(expires_at)
        try:
            record_id = str(cast(int, self.r.incr(self.SEQ_KEY)))
            key = self._k(record_id)
            pipe = self.r.pipeline(transaction=True)
            pipe.hset(key, mapping={"user_id": str(user_id), "expires_at": str(exp_ts)})
            pipe.expireat(key, exp_ts)
            pipe.execute()
        except redis.RedisError as exc:
            raise PersistenceError("Unable to create refresh token record") from exc
        return LedgerRecord(
            id=record_id,
            user_id=int(user_id),
            expires_at=datetime.fromtimestamp(exp_ts, tz=UTC),
        )

    def delete_by_id(self, record_id: str) -> bool:
        if not self._valid_id(record_id):
            return False
        key = self._k(record_id)
        try:
            with self.r.pipeline(transaction=True) as p:
                p.hget(key, "expires_at")
                p.delete(key)
                out = p.execute()
        except redis.RedisError as exc:
            raise PersistenceError("Unable to delete refresh token record") from exc

        exp_raw, deleted = out[0], int(out[1])
        if not deleted:
            return False
        # Expired leftovers are removed too but do not count as a revocation.
        return int(self._b(exp_raw, "0")) > self._to_ts(self.clock())

    def find_by_id(self, record_id: str) -> LedgerRecord | None:
        if not self._valid_id(record_id):
            return None
        try:
            h = self.r.hgetall(self._k(record_id))
        except redis.RedisError as exc:
            raise PersistenceError("Unable to read refresh token record") from exc
        if not h:
            return None

        fields = {self._b(k): self._b(v) for k, v in h.items()}
        exp_ts = int(fields.get("expires_at", "0"))
        if exp_ts <= self._to_ts(self.clock()):
            return None
        return LedgerRecord(
            id=str(record_id),
            user_id=int(fields.get("user_id", "0")),
            expires_at=datetime.fromtimestamp(exp_ts, tz=UTC),
        )

    def purge_expired(self, now: datetime) -> int:
        """
        Delete records whose ``expires_at`` is not after ``now``.

        Redis normally drops them on its own; this catches records whose TTL
        has not fired yet relative to ``now``.
        """
        now_ts = self._to_ts(now)
        stale: list[str] = []
        try:
            for raw_key in self.r.scan_iter(match="rt:*"):
                key = self._b(raw_key)
                if not self._valid_id(key[3:]):
                    continue
                exp_raw = self.r.hget(key, "expires_at")
                if exp_raw is not None and int(self._b(exp_raw, "0")) <= now_ts:
                    stale.append(key)
            if not stale:
                return 0
            return int(self.r.delete(*stale))
        except redis.RedisError as exc:
            raise PersistenceError("Unable to purge refresh token records") from exc
