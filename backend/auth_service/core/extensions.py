"""Extension singletons shared by the factory, the ledgers and the CLI."""

from __future__ import annotations

import redis  # type: ignore[import-untyped]
from flask import Flask
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from redis.exceptions import RedisError  # type: ignore[import-untyped]
from sqlalchemy import MetaData

# Deterministic constraint names keep Alembic autogenerate diffs stable.
NAMING_CONVENTION = {
    "pk": "pk_%(table_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ix": "ix_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
}

db: SQLAlchemy = SQLAlchemy(
    metadata=MetaData(naming_convention=NAMING_CONVENTION),
    session_options={"autoflush": False},
)
migrate = Migrate(render_as_batch=True)

# Only populated when the refresh ledger lives in Redis.
redis_client: redis.Redis | None = None


def _connect_redis(url: str | None) -> redis.Redis:
    if not url:
        raise RuntimeError("REFRESH_LEDGER_BACKEND=redis requires REDIS_URL")
    client = redis.Redis.from_url(url)
    try:
        client.ping()
    except RedisError as exc:
        raise RuntimeError(f"Failed to connect to Redis at {url!r}") from exc
    return client


def init_app(app: Flask) -> None:
    """Bind the database, migrations and, for the Redis ledger, a Redis client.

    Importing :mod:`auth_service.models` here registers every table on the
    shared metadata before Flask-Migrate inspects it.
    """
    global redis_client

    db.init_app(app)
    from auth_service import models as _models  # noqa: F401

    migrate.init_app(app, db)

    if app.config.get("REFRESH_LEDGER_BACKEND", "sql") == "redis":
        redis_client = _connect_redis(app.config.get("REDIS_URL"))
        app.extensions["redis_client"] = redis_client
    else:
        redis_client = None
        app.extensions.pop("redis_client", None)


def get_redis() -> redis.Redis:
    """Return the Redis client created by :func:`init_app`."""
    if redis_client is None:
        raise RuntimeError("Redis client is not configured (REFRESH_LEDGER_BACKEND != 'redis').")
    return redis_client
