# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication Service

WHY: Every checkout and catalog change must be attributable to a staff
account. Uses bcrypt for password hashing and validates password strength.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor 12)
- Minimum 8 characters, upper, lower, digit, special char
- Bearer tokens managed separately (see token_service.py)
"""

import re

import bcrypt

from ..exceptions import InvalidInput, NotFound
from ..extensions import db
from ..models import User
from ..models.auth import ROLES, ROLE_CASHIER
from hive.time_utils import utcnow


class PasswordValidationError(InvalidInput):
    """Raised when password doesn't meet strength requirements."""
    pass


EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def validate_password_strength(password: str) -> None:
    if not isinstance(password, str) or len(password) < 8:
        raise PasswordValidationError("Password must be at least 8 characters long")

    if not re.search(r'[A-Z]', password):
        raise PasswordValidationError("Password must contain at least one uppercase letter")

    if not re.search(r'[a-z]', password):
        raise PasswordValidationError("Password must contain at least one lowercase letter")

    if not re.search(r'\d', password):
        raise PasswordValidationError("Password must contain at least one digit")

    if not re.search(r"[!@#$%^&*(),.'\":{}|<>]", password):
        raise PasswordValidationError("Password must contain at least one special character")


def hash_password(password: str) -> str:
    """Hash password using bcrypt with cost factor 12, after a strength check."""
    validate_password_strength(password)
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """Timing-safe bcrypt check. Malformed hashes never match."""
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def normalize_role(role: str | None) -> str:
    value = (role or "").strip().lower()
    if value not in ROLES:
        raise InvalidInput(f"role must be one of: {', '.join(ROLES)}")
    return value


def create_user(email: str, password: str, role: str = ROLE_CASHIER) -> User:
    """
    Create a staff account. Self-registration always yields a cashier;
    only the CLI passes another role.

    Raises InvalidInput for a bad email, duplicate email, or weak password.
    """
    email = (email or "").strip().lower()
    if not EMAIL_RE.match(email):
        raise InvalidInput("A valid email is required")

    role = normalize_role(role)

    if db.session.query(User).filter_by(email=email).first():
        raise InvalidInput("Email already registered")

    user = User(email=email, password_hash=hash_password(password), role=role)
    db.session.add(user)
    db.session.commit()
    return user


def authenticate(email: str, password: str) -> User | None:
    """
    Returns User if credentials are valid and the account is active.
    Updates last_login_at on success.
    """
    email = (email or "").strip().lower()
    user = db.session.query(User).filter(User.email == email, User.is_active.is_(True)).first()
    if not user:
        return None

    if verify_password(password or "", user.password_hash):
        user.last_login_at = utcnow()
        db.session.commit()
        return user

    return None


def set_role(email: str, role: str) -> User:
    user = db.session.query(User).filter_by(email=(email or "").strip().lower()).first()
    if not user:
        raise NotFound("User not found")
    user.role = normalize_role(role)
    db.session.commit()
    return user
