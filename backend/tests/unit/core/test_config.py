"""Unit tests for environment-based configuration selection."""

from __future__ import annotations

import pytest

from auth_service.core.config import (
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    env_bool,
    get_config,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [("production", ProductionConfig), ("Testing", TestingConfig), ("unknown", DevelopmentConfig)],
)
def test_get_config_reads_app_env(monkeypatch, value, expected):
    monkeypatch.setenv("APP_ENV", value)
    assert get_config() is expected


def test_env_bool(monkeypatch):
    monkeypatch.setenv("FLAG", "Yes")
    assert env_bool("FLAG") is True
    monkeypatch.setenv("FLAG", "0")
    assert env_bool("FLAG", default=True) is False
    monkeypatch.delenv("FLAG")
    assert env_bool("FLAG", default=True) is True


def test_token_defaults():
    assert TestingConfig.ACCESS_TOKEN_TTL_SECONDS == 3600
    assert TestingConfig.REFRESH_LEDGER_BACKEND == "sql"
    assert TestingConfig.JWT_ISSUER
