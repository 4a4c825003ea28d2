import os
import click
from flask import current_app
from flask.cli import with_appcontext
from flask_migrate import upgrade as alembic_upgrade, stamp as alembic_stamp, migrate as alembic_migrate


def _assert_safe_for_upgrade():
    app_env = (os.getenv("APP_ENV") or "").lower()
    production = app_env == "production" or not (current_app.debug or current_app.testing)
    if production:
        if (os.getenv("ALLOW_DB_MIGRATIONS") or "").lower() not in ("1", "true", "yes"):
            raise click.ClickException("Refusing to run DB migration in production without ALLOW_DB_MIGRATIONS=true")


@click.command("db-migrate-safe")
@click.option("-m", "--message", default="auto migration", help="Migration message")
@with_appcontext
def db_migrate_safe(message):
    """Generate a new migration script from current models."""
    alembic_migrate(message=message)
    click.echo("Migration script generated.")


@click.command("db-upgrade-safe")
@with_appcontext
def db_upgrade_safe():
    """Apply migrations to the configured database."""
    _assert_safe_for_upgrade()
    alembic_upgrade()
    click.echo("Database upgraded.")


@click.command("db-stamp-safe")
@click.option("--revision", default="head", help="Revision to stamp, default 'head'")
@with_appcontext
def db_stamp_safe(revision):
    """Mark the database at a given revision without running migrations."""
    _assert_safe_for_upgrade()
    alembic_stamp(revision)
    click.echo(f"Database stamped at {revision}.")


@click.command("backfill-cogs")
@click.option("--dry-run", is_flag=True, help="Report what would be recorded without writing")
@with_appcontext
def backfill_cogs(dry_run):
    """Record COGS for SOLD items that have a sale date but no record."""
    from shelfwise.models import db
    from shelfwise.services import cogs
    from shelfwise.utils.cache import get_cache

    if dry_run:
        pending = cogs.backfill_candidates()
        click.echo(f"Would record {len(pending)} COGS records.")
        return
    recorded, failures = cogs.backfill()
    db.session.commit()
    get_cache().invalidate()
    for failure in failures:
        click.echo(f"item {failure['item_id']}: {failure['error']}", err=True)
    click.echo(f"Recorded {len(recorded)} COGS records ({len(failures)} failures).")


def register_cli(app):
    app.cli.add_command(db_migrate_safe)
    app.cli.add_command(db_upgrade_safe)
    app.cli.add_command(db_stamp_safe)
    app.cli.add_command(backfill_cogs)
