"""Flask CLI commands for schema setup, provisioning and token housekeeping."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from merchant_auth.core.extensions import db
from merchant_auth.core.security import get_components
from merchant_auth.seeds import permissions as permission_seeds
from merchant_auth.services import MerchantService
from merchant_auth.services._shared.errors import ConflictError, StorageError
from merchant_auth.services.merchants.dto import MerchantCreateIn

LOGGER = logging.getLogger(__name__)


def _echo_summary(summary: dict[str, dict[str, int]]) -> None:
    """Pretty-print a tabular summary of seed results."""
    click.echo("Seed summary:")
    if not summary:
        click.echo("  (no changes)")
        return
    width = max(len(name) for name in summary)
    for table, counters in sorted(summary.items()):
        created = counters.get("created", 0)
        existing = counters.get("existing", 0)
        click.echo(f"  {table.ljust(width)}  created={created:>2}  existing={existing:>2}")


@click.group("auth")
def auth_cli() -> None:
    """Authentication service maintenance commands."""


@auth_cli.command("init-db")
@with_appcontext
def init_db_command() -> None:
    """Create every table that does not exist yet."""
    db.create_all()
    click.echo("Database schema ready.")


@auth_cli.command("seed-permissions")
@click.option("--verbose", is_flag=True, help="Enable verbose logging for seeding.")
@with_appcontext
def seed_permissions_command(verbose: bool) -> None:
    """Insert the permission catalog and the shared system roles."""
    try:
        summary = permission_seeds.seed_permissions(db, verbose=verbose)
    except Exception as exc:  # pragma: no cover - CLI safeguard
        db.session.rollback()
        raise click.ClickException(f"Seeding failed: {exc}") from exc
    _echo_summary(summary)


@auth_cli.command("create-merchant")
@click.option("--name", required=True)
@click.option("--phone", required=True)
@click.option("--pin", required=True, prompt=True, hide_input=True)
@click.option("--timezone", default="UTC", show_default=True)
@click.option("--user-management/--no-user-management", default=False, show_default=True)
@with_appcontext
def create_merchant_command(
    name: str, phone: str, pin: str, timezone: str, user_management: bool
) -> None:
    """Provision a merchant account with a hashed PIN."""
    service = MerchantService(hasher=get_components().hasher)
    dto = MerchantCreateIn(
        name=name, phone=phone, pin=pin, timezone=timezone, user_management=user_management
    )
    try:
        merchant = service.create_merchant(dto)
    except ConflictError as exc:
        raise click.ClickException("A merchant with this phone number already exists") from exc
    except ValueError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(f"Merchant created: {merchant.id}")


@auth_cli.command("purge-expired-tokens")
@with_appcontext
def purge_expired_tokens_command() -> None:
    """Delete refresh token records whose lifetime has ended."""
    components = get_components()
    now = components.merchant_sessions.now_utc()
    try:
        removed = components.refresh_store.purge_expired(now)
    except StorageError as exc:
        raise click.ClickException("Refresh token store is unavailable") from exc
    LOGGER.info("Expired refresh tokens purged", extra={"reason": "ttl"})
    click.echo(f"Purged {removed} expired refresh token(s).")
