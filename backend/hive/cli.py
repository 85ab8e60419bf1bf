# Overview: Flask CLI command groups for bootstrap, users, catalog, and sessions.

# backend/hive/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Idempotent bootstrap: tables, default settings, catalog, admin and cashier users.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Users:
# - python -m flask users list
# - python -m flask users create --email admin@hive.local --password "Password123!" --role admin
# - python -m flask users set-role cashier@hive.local admin
#
# Catalog:
# - python -m flask catalog seed
#   Insert the default items when the catalog is empty.
#
# Sessions:
# - python -m flask sessions clear --yes
#   Delete every customer session.

import click
from flask.cli import with_appcontext

from .exceptions import HiveError
from .extensions import db
from .models import User
from .models.auth import ROLES
from .services import catalog_service, session_service, settings_service, token_service
from .services.auth_service import create_user, set_role


DEFAULT_PASSWORD = "Password123!"


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """
    Create tables, default settings, the default catalog, and two users:
    admin@hive.local (admin) and cashier@hive.local (cashier).

    SECURITY: Change passwords immediately in production!
    """
    click.echo("START Initializing Cozy Hive...")

    db.create_all()
    settings = settings_service.get_settings()
    click.echo(f"PASS Settings ready (hourly rate {settings.hourly_rate_cents} cents, {settings.currency})")

    created = catalog_service.seed_catalog()
    if created:
        click.echo(f"PASS Seeded {created} catalog items")
    else:
        click.echo("WARN  Catalog already contains items, skipping...")

    for email, role in (("admin@hive.local", "admin"), ("cashier@hive.local", "cashier")):
        if db.session.query(User).filter_by(email=email).first():
            click.echo(f"WARN  User '{email}' already exists, skipping...")
            continue
        try:
            create_user(email, DEFAULT_PASSWORD, role=role)
            click.echo(f"PASS Created user: {email} with role '{role}'")
        except HiveError as e:
            click.echo(f"FAIL Failed to create user '{email}': {e}")

    click.echo("\nDefault Credentials (CHANGE IN PRODUCTION!):")
    click.echo(f"   admin   -> admin@hive.local   / {DEFAULT_PASSWORD}")
    click.echo(f"   cashier -> cashier@hive.local / {DEFAULT_PASSWORD}")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete. Run 'python -m flask system init' to initialize.")


@click.group('users')
def users_group():
    """User management commands."""


@users_group.command('create')
@click.option('--email', prompt=True, help='Email address')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice(list(ROLES)), default='cashier', show_default=True, help='Role')
@with_appcontext
def create_user_cli(email, password, role):
    """Create a staff account."""
    try:
        user = create_user(email, password, role=role)
    except HiveError as e:
        raise click.ClickException(str(e))
    click.echo(f"PASS Created user {user.email} (ID: {user.id}) with role '{user.role}'")


@users_group.command('set-role')
@click.argument('email')
@click.argument('role', type=click.Choice(list(ROLES)))
@with_appcontext
def set_role_cli(email, role):
    """Change a user's role and sign them out everywhere."""
    try:
        user = set_role(email, role)
    except HiveError as e:
        raise click.ClickException(str(e))
    revoked = token_service.revoke_all_user_tokens(user.id, reason="Role changed")
    click.echo(f"PASS {user.email} is now '{user.role}' ({revoked} tokens revoked)")


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with role and active status."""
    users = db.session.query(User).order_by(User.id).all()
    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*70)
    click.echo(f"{'ID':<5} {'Email':<35} {'Role':<10} {'Active':<8}")
    click.echo("="*70)
    for user in users:
        active_str = "Yes" if user.is_active else "No"
        click.echo(f"{user.id:<5} {user.email:<35} {user.role:<10} {active_str:<8}")
    click.echo("="*70 + "\n")


@click.group('catalog')
def catalog_group():
    """Item catalog commands."""


@catalog_group.command('seed')
@with_appcontext
def seed_catalog_cli():
    created = catalog_service.seed_catalog()
    if created:
        click.echo(f"PASS Seeded {created} catalog items")
    else:
        click.echo("WARN  Catalog already contains items. Seeding skipped.")


@click.group('sessions')
def sessions_group():
    """Customer session maintenance."""


@sessions_group.command('clear')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def clear_sessions_cli(yes):
    if not yes:
        click.confirm("WARN This will DELETE every customer session. Are you sure?", abort=True)
    count = session_service.clear_all_sessions()
    click.echo(f"PASS Deleted {count} sessions")


def register_commands(app):
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(catalog_group)
    app.cli.add_command(sessions_group)
