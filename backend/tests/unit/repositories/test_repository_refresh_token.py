"""Unit tests for RefreshTokenRepository."""

from datetime import UTC, datetime, timedelta

import pytest

from auth_service.models.refresh_token import RefreshToken
from auth_service.repositories.refresh_token import RefreshTokenRepository
from tests.factories.user import UserFactory

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


class TestRefreshTokenRepository:
    @pytest.fixture()
    def repo(self):
        return RefreshTokenRepository()

    @pytest.fixture()
    def user(self, session):
        return UserFactory()

    def _row(self, repo, user, *, expires_in: timedelta) -> RefreshToken:
        return repo.add(RefreshToken(user_id=user.id, expires_at=NOW + expires_in))

    def test_get_live_filters_expired_rows(self, repo, user):
        live = self._row(repo, user, expires_in=timedelta(days=1))
        stale = self._row(repo, user, expires_in=-timedelta(seconds=1))

        assert repo.get_live(live.id, now=NOW).id == live.id
        assert repo.get_live(stale.id, now=NOW) is None

    def test_expires_at_round_trips_as_utc(self, repo, user, session):
        row = self._row(repo, user, expires_in=timedelta(days=1))
        session.commit()
        session.expire_all()

        fetched = repo.get(row.id)
        assert fetched.expires_at.tzinfo is not None
        assert fetched.expires_at == NOW + timedelta(days=1)

    def test_delete_by_id_reports_live_rows_only(self, repo, user):
        live = self._row(repo, user, expires_in=timedelta(days=1))
        stale = self._row(repo, user, expires_in=-timedelta(days=1))

        assert repo.delete_by_id(live.id, now=NOW) is True
        assert repo.delete_by_id(live.id, now=NOW) is False
        assert repo.delete_by_id(stale.id, now=NOW) is False
        assert repo.count_for_user(user.id) == 0

    def test_delete_expired(self, repo, user):
        self._row(repo, user, expires_in=timedelta(days=1))
        self._row(repo, user, expires_in=-timedelta(days=1))
        self._row(repo, user, expires_in=timedelta(0))

        assert repo.delete_expired(now=NOW) == 2
        assert repo.count_for_user(user.id) == 1
