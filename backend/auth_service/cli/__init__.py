"""Command-line interface registration for the Flask application."""

from __future__ import annotations

from flask import Flask

from .keys import keys_cli
from .ledger import ledger_cli


def init_app(app: Flask) -> None:
    """Register the ``keys`` and ``ledger`` command groups on ``app.cli``."""
    app.cli.add_command(keys_cli)
    app.cli.add_command(ledger_cli)
