"""
Unit tests for RedisRefreshTokenLedger using fakeredis.

They use fakeredis.FakeRedis so they run entirely in-memory; an injected clock
stands in for the passage of time.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import fakeredis
import pytest
import redis

from auth_service.infra.redis.redis_refresh_token_ledger import RedisRefreshTokenLedger
from auth_service.services._shared.errors import PersistenceError


def _now() -> datetime:
    """Return a timezone-aware UTC "now" truncated to seconds."""
    return datetime.now(UTC).replace(microsecond=0)


@pytest.fixture
def fake_redis():
    """Provide a fresh FakeRedis instance for each test."""
    r = fakeredis.FakeRedis()
    r.flushall()
    return r


@pytest.fixture
def ledger(fake_redis):
    return RedisRefreshTokenLedger(r=fake_redis)


class TestRedisRefreshTokenLedger:
    def test_create_and_find(self, ledger, fake_redis):
        expires_at = _now() + timedelta(days=365)
        record = ledger.create(user_id=5, expires_at=expires_at)

        assert record.id == "1"
        assert record.expires_at == expires_at
        assert ledger.find_by_id("1") == record
        assert fake_redis.ttl("rt:1") > 0

    def test_ids_are_sequential(self, ledger):
        ids = [ledger.create(user_id=1, expires_at=_now() + timedelta(days=1)).id for _ in range(3)]

        assert ids == ["1", "2", "3"]

    def test_delete_is_idempotent(self, ledger):
        record = ledger.create(user_id=5, expires_at=_now() + timedelta(days=1))

        assert ledger.delete_by_id(record.id) is True
        assert ledger.delete_by_id(record.id) is False
        assert ledger.find_by_id(record.id) is None

    def test_expired_by_clock_is_absent(self, fake_redis):
        start = _now()
        clock = {"now": start}
        ledger = RedisRefreshTokenLedger(r=fake_redis, clock=lambda: clock["now"])
        record = ledger.create(user_id=5, expires_at=start + timedelta(seconds=60))

        clock["now"] = start + timedelta(seconds=61)

        assert ledger.find_by_id(record.id) is None
        assert ledger.delete_by_id(record.id) is False

    def test_purge_expired_skips_sequence_and_live_records(self, ledger, fake_redis):
        start = _now()
        live = ledger.create(user_id=1, expires_at=start + timedelta(days=1))
        ledger.create(user_id=1, expires_at=start + timedelta(seconds=30))

        removed = ledger.purge_expired(start + timedelta(minutes=5))

        assert removed == 1
        assert ledger.find_by_id(live.id) is not None
        assert fake_redis.exists("rt:seq")

    @pytest.mark.parametrize("record_id", ["rt:seq", "seq", "", "²", "١"])
    def test_non_numeric_ids(self, ledger, record_id):
        assert ledger.find_by_id(record_id) is None
        assert ledger.delete_by_id(record_id) is False

    def test_redis_errors_become_persistence_errors(self):
        class DownRedis(fakeredis.FakeRedis):
            def incr(self, *args, **kwargs):
                raise redis.ConnectionError("connection refused")

        ledger = RedisRefreshTokenLedger(r=DownRedis())

        with pytest.raises(PersistenceError):
            ledger.create(user_id=1, expires_at=_now() + timedelta(days=1))
