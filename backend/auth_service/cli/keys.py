"""Flask CLI commands for development key material."""

from __future__ import annotations

import logging
from pathlib import Path

import click
from flask import current_app
from flask.cli import with_appcontext

from auth_service.core.keys import generate_private_key_pem, public_key_pem

LOGGER = logging.getLogger(__name__)


def _ensure_non_production() -> None:
    """Abort when running with production settings."""
    if not current_app.debug and not current_app.testing:
        raise click.UsageError(
            "The 'flask keys generate' command is restricted to development or testing."
        )


@click.group("keys")
def keys_cli() -> None:
    """Manage the RSA key pair used to sign access tokens."""


@keys_cli.command("generate")
@click.option(
    "--out",
    "out_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Private key path (defaults to JWT_PRIVATE_KEY_PATH).",
)
@click.option("--bits", type=click.IntRange(min=2048), default=2048, show_default=True)
@click.option("--force", is_flag=True, help="Overwrite existing files.")
@with_appcontext
def generate_keys(out_path: Path | None, bits: int, force: bool) -> None:
    """Write ``private.pem`` and ``public.pem`` (PKCS#8 / SPKI)."""
    _ensure_non_production()
    private_path = out_path or Path(current_app.config.get("JWT_PRIVATE_KEY_PATH") or "certs/private.pem")
    public_path = private_path.with_name("public.pem")

    existing = [p for p in (private_path, public_path) if p.exists()]
    if existing and not force:
        names = ", ".join(str(p) for p in existing)
        raise click.ClickException(f"Refusing to overwrite {names} (use --force).")

    private_pem = generate_private_key_pem(key_size=bits)
    private_path.parent.mkdir(parents=True, exist_ok=True)
    private_path.write_bytes(private_pem)
    private_path.chmod(0o600)
    public_path.write_bytes(public_key_pem(private_pem))

    LOGGER.info("keys.generated", extra={"path": str(private_path)})
    click.echo(f"Wrote {private_path} and {public_path}")
