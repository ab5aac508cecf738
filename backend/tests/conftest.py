"""Pytest fixtures configuring an isolated transactional database layer.

Each test runs inside a SAVEPOINT-backed transaction against an in-memory
SQLite database so data changes never leak between cases. A single RSA key
pair is generated per session and injected through the test config.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any

import pytest
from sqlalchemy import event
from sqlalchemy.orm import scoped_session, sessionmaker

from auth_service.core.config import TestingConfig
from auth_service.core.extensions import db as _db  # Flask-SQLAlchemy instance
from auth_service.core.keys import KeyMaterialProvider, generate_private_key_pem
from auth_service.factory import create_app  # application factory under test
from auth_service.services._shared.ports import InMemoryRefreshTokenLedger
from tests.helpers.tokens import REFRESH_SECRET


@pytest.fixture(scope="session")
def private_key_pem() -> bytes:
    """RSA private key (PKCS#8 PEM) shared by the whole test session."""
    return generate_private_key_pem()


@pytest.fixture(scope="session")
def app(private_key_pem):
    """Create a Flask application configured for testing.

    Returns
    -------
    flask.Flask
        Application instance with the testing config, the session key pair and
        logging noise reduced.
    """

    class TestConfig(TestingConfig):
        """Testing configuration with in-memory key material."""

        SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
        JWT_PRIVATE_KEY = private_key_pem.decode("ascii")
        AUTH_COOKIE_DOMAIN = None
        AUTH_COOKIE_SECURE = False
        CORS_ORIGINS = "http://localhost:5173"
        LOG_LEVEL = "WARNING"

    # Ensure env-based config does not leak into tests
    os.environ.pop("DATABASE_URL", None)
    app = create_app(TestConfig, instance_relative_config=False)
    app.logger.setLevel("WARNING")
    return app


@pytest.fixture(scope="session")
def db(app):
    """Create database tables once per test session.

    Yields
    ------
    flask_sqlalchemy.SQLAlchemy
        Database extension bound to the testing application.
    """
    with app.app_context():
        _db.create_all()
        yield _db
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope="session")
def connection(db):
    """Keep a dedicated DBAPI connection open for the whole session."""
    conn = db.engine.connect()
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="function")
def session(db, connection):
    """Provide a SQLAlchemy session wrapped in a nested transaction.

    Notes
    -----
    The fixture mirrors the SQLAlchemy 2.0 pattern for transactional tests: it
    begins a top-level transaction, starts a SAVEPOINT per test, and reinstalls
    the SAVEPOINT whenever SQLAlchemy ends one. Unit of Work commits (the SQL
    ledger commits on every call) only release inner savepoints.
    """
    # 1) Top-level transaction
    top_trans = connection.begin()

    # 2) Scoped session bound to the connection
    SessionFactory = sessionmaker(bind=connection, future=True)
    scoped = scoped_session(SessionFactory)

    # 3) SAVEPOINT per test
    nested = connection.begin_nested()

    # 4) Re-create SAVEPOINT when the previous nested transaction ends
    @event.listens_for(scoped(), "after_transaction_end")
    def _restart_savepoint(sess, trans):  # pragma: no cover
        if trans.nested and not trans._parent.nested:
            nonlocal nested
            nested = connection.begin_nested()

    # 5) Monkey-patch db.session so app code uses this scoped session
    original_session = db.session
    db.session.remove()
    db.session = scoped

    try:
        yield scoped
    finally:
        scoped.remove()
        db.session = original_session
        top_trans.rollback()


@pytest.fixture(scope="session")
def faker():
    """Provide a :class:`faker.Faker` instance seeded for deterministic tests."""
    from faker import Faker

    fk = Faker()
    Faker.seed(1337)
    return fk


# -- Hook up Factory Boy to pytest SQLAlchemy session --------------------------
@pytest.fixture(autouse=True)
def _factories_session(session):
    """Wire Factory Boy's session helper to the transactional session fixture."""
    from tests.factories import SQLAlchemySession

    SQLAlchemySession.set(session)
    yield


# -- Token stack ----------------------------------------------------------------
@pytest.fixture()
def keys(private_key_pem) -> KeyMaterialProvider:
    """Key material identical to the application's."""
    return KeyMaterialProvider(private_key_pem=private_key_pem, refresh_secret=REFRESH_SECRET)


@pytest.fixture()
def memory_ledger() -> InMemoryRefreshTokenLedger:
    """Fresh in-memory ledger per test."""
    return InMemoryRefreshTokenLedger()


@pytest.fixture()
def client(app):
    """Return a Flask test client."""
    return app.test_client()


@pytest.fixture()
def freeze_time() -> Callable[[str | None], Any]:
    """Factory returning :func:`freezegun.freeze_time`.

    Examples
    --------
    >>> def test_with_frozen_time(freeze_time):
    ...     with freeze_time("2024-03-01"):
    ...         ...
    """

    from freezegun import freeze_time as _freeze_time

    def _factory(target: str | None = None) -> Any:
        return _freeze_time(target or "2024-01-01")

    return _factory
