"""
Pytest fixtures for Cozy Hive backend tests.

Provides an in-memory database, staff users, catalog items, and an
authenticated test client helper.
"""

import bcrypt
import pytest

from hive import create_app
from hive.extensions import db
from hive.models import Item, User


PASSWORD = "Password123!"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'BUSINESS_TIMEZONE': 'UTC',
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        db.session.rollback()


def _make_user(db_session, email: str, role: str) -> User:
    # Low bcrypt cost keeps the suite fast; verification is cost-agnostic
    password_hash = bcrypt.hashpw(PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")
    user = User(email=email, password_hash=password_hash, role=role)
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture(scope='function')
def admin_user(db_session):
    return _make_user(db_session, "admin@hive.test", "admin")


@pytest.fixture(scope='function')
def cashier_user(db_session):
    return _make_user(db_session, "cashier@hive.test", "cashier")


@pytest.fixture(scope='function')
def coffee(db_session):
    item = Item(name="Coffee", price_cents=3000)
    db_session.add(item)
    db_session.commit()
    return item


@pytest.fixture(scope='function')
def tea(db_session):
    item = Item(name="Tea", price_cents=2500)
    db_session.add(item)
    db_session.commit()
    return item


def get_auth_token(client, email: str, password: str = PASSWORD) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'email': email,
        'password': password,
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def admin_headers(client, admin_user):
    return auth_headers(get_auth_token(client, admin_user.email))


@pytest.fixture(scope='function')
def cashier_headers(client, cashier_user):
    return auth_headers(get_auth_token(client, cashier_user.email))
