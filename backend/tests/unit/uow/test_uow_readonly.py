"""Read-only Unit of Work: reads pass, writes and commits are refused."""

from __future__ import annotations

import pytest

from auth_service.models.user import User
from auth_service.uow import SQLAlchemyReadOnlyUnitOfWork, SQLAlchemyUnitOfWork
from tests.factories.user import UserFactory


class TestReadOnlyUnitOfWork:
    def test_pending_changes_cannot_be_flushed(self, session):
        with SQLAlchemyReadOnlyUnitOfWork() as uow, pytest.raises(RuntimeError, match="ORM flush blocked"):
            uow.session.add(UserFactory.build())
            uow.session.flush()

    def test_reads_committed_rows(self, session):
        with SQLAlchemyUnitOfWork() as uow:
            user = uow.users.add(UserFactory.build(email="reader@example.com"))
            user_id = user.id

        with SQLAlchemyReadOnlyUnitOfWork() as uow:
            assert uow.users.get(user_id) is not None
            assert uow.users.get_by_email("READER@example.com").id == user_id
            assert uow.session.query(User).count() >= 1

    def test_commit_is_refused(self, session):
        with SQLAlchemyReadOnlyUnitOfWork() as uow, pytest.raises(RuntimeError, match="does not allow commit"):
            uow.commit()

    def test_writes_work_again_after_exit(self, session):
        with SQLAlchemyReadOnlyUnitOfWork():
            pass

        with SQLAlchemyUnitOfWork() as uow:
            assert uow.users.add(UserFactory.build()).id is not None
