"""Unit tests for the logging utility."""

from __future__ import annotations

import json
import logging

from auth_service.core.logger import JSONFormatter, configure_logging


def test_configure_logging_sets_level() -> None:
    """``configure_logging`` should set the root logger level."""

    configure_logging("DEBUG")

    assert logging.getLogger().level == logging.DEBUG
    configure_logging("WARNING")


def test_json_formatter_renders_known_extras_only() -> None:
    record = logging.LogRecord("auth", logging.INFO, __file__, 1, "tokens.rotated", None, None)
    record.user_id = 7
    record.ledger_id = "12"
    record.refresh_token = "eyJ..."  # never rendered

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "tokens.rotated"
    assert payload["user_id"] == 7
    assert payload["ledger_id"] == "12"
    assert "refresh_token" not in payload


def test_request_id_header_is_echoed(client) -> None:
    resp = client.get("/api/v1/health", headers={"X-Request-ID": "req-123"})

    assert resp.headers["X-Request-ID"] == "req-123"
