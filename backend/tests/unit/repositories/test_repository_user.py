"""Unit tests for UserRepository."""

import pytest

from auth_service.repositories.user import UserRepository
from tests.factories.user import UserFactory


class TestUserRepository:
    """Ensure ``UserRepository`` performs core persistence operations."""

    @pytest.fixture()
    def repo(self):
        return UserRepository()

    def test_create_and_get_user(self, repo, session):
        """Create a user and fetch it by email to verify retrieval."""
        u = UserFactory(email="alice@example.com", first_name="Alice")
        session.commit()

        fetched = repo.get_by_email("alice@example.com")
        assert fetched is not None
        assert fetched.id == u.id
        assert fetched.first_name == "Alice"

    def test_get_by_email_is_case_insensitive(self, repo, session):
        u = UserFactory(email="carol@example.com")
        session.commit()

        assert repo.get_by_email("  CAROL@Example.com ").id == u.id

    def test_exists_by_email(self, repo, session):
        """Return existence flags for known and unknown email addresses."""
        UserFactory(email="bob@example.com")
        session.commit()

        assert repo.exists_by_email("bob@example.com")
        assert not repo.exists_by_email("nonexistent@example.com")

    def test_get_and_count(self, repo, session):
        before = repo.count()
        u = UserFactory()
        session.commit()

        assert repo.get(u.id) is u
        assert repo.get(u.id + 1000) is None
        assert repo.count() == before + 1
