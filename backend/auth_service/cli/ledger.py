"""Flask CLI commands for refresh-token ledger housekeeping."""

from __future__ import annotations

from datetime import UTC, datetime

import click
from flask.cli import with_appcontext

from auth_service.api.deps import get_token_service


@click.group("ledger")
def ledger_cli() -> None:
    """Refresh-token ledger maintenance."""


@ledger_cli.command("purge-expired")
@with_appcontext
def purge_expired() -> None:
    """Delete ledger records that are already past their expiry.

    Expired records are never honoured on lookup; this only reclaims space.
    """
    removed = get_token_service().ledger.purge_expired(datetime.now(UTC))
    click.echo(f"Purged {removed} expired refresh token record(s).")
