"""
CLI tests via Flask's CliRunner.
"""

from hive.models import AuthToken, Item, User
from hive.services import session_service, token_service


def test_system_init_is_idempotent(app, db_session):
    runner = app.test_cli_runner()

    result = runner.invoke(args=["system", "init"])
    assert result.exit_code == 0, result.output
    assert "Seeded 4 catalog items" in result.output
    assert db_session.query(Item).count() == 4
    assert {u.email: u.role for u in db_session.query(User)} == {
        "admin@hive.local": "admin",
        "cashier@hive.local": "cashier",
    }

    result = runner.invoke(args=["system", "init"])
    assert result.exit_code == 0, result.output
    assert "already exists" in result.output
    assert db_session.query(Item).count() == 4


def test_users_create_and_set_role(app, db_session):
    runner = app.test_cli_runner()

    result = runner.invoke(args=[
        "users", "create", "--email", "owner@hive.test", "--password", "Password123!", "--role", "cashier",
    ])
    assert result.exit_code == 0, result.output

    user = db_session.query(User).filter_by(email="owner@hive.test").one()
    token_service.create_token(user.id)

    result = runner.invoke(args=["users", "set-role", "owner@hive.test", "admin"])
    assert result.exit_code == 0, result.output
    assert "1 tokens revoked" in result.output
    assert user.role == "admin"
    assert db_session.query(AuthToken).filter_by(is_revoked=False).count() == 0


def test_users_create_rejects_weak_password(app, db_session):
    result = app.test_cli_runner().invoke(args=[
        "users", "create", "--email", "weak@hive.test", "--password", "weak", "--role", "cashier",
    ])
    assert result.exit_code != 0
    assert db_session.query(User).count() == 0


def test_sessions_clear(app, db_session):
    session_service.start_session("Alice")
    session_service.start_session("Bob")

    result = app.test_cli_runner().invoke(args=["sessions", "clear", "--yes"])
    assert result.exit_code == 0, result.output
    assert "Deleted 2 sessions" in result.output
    assert session_service.list_sessions() == []


def test_catalog_seed_skips_when_populated(app, coffee):
    result = app.test_cli_runner().invoke(args=["catalog", "seed"])
    assert result.exit_code == 0, result.output
    assert "Seeding skipped" in result.output
