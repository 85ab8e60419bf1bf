# Overview: Service-layer operations for bearer tokens; encapsulates business logic and database work.

"""
Bearer Token Management

SECURITY FEATURES:
- Cryptographically secure random tokens (32 bytes)
- Tokens hashed with SHA-256 before storage (fast, one-way)
- Absolute lifetime = auto_logout_hours setting at login time
- Revocable on logout
"""

import hashlib
import secrets
from datetime import timedelta

from ..extensions import db
from ..models import AuthToken, User
from . import settings_service
from hive.time_utils import utcnow


def generate_token() -> str:
    """64-character hex string (32 bytes of entropy). Never stored."""
    return secrets.token_hex(32)


def hash_token(token: str) -> str:
    """
    SHA-256 for storage. Tokens are already high-entropy (unlike passwords),
    so a fast hash is sufficient.
    """
    return hashlib.sha256(token.encode('utf-8')).hexdigest()


def create_token(
    user_id: int,
    user_agent: str | None = None,
    ip_address: str | None = None,
) -> tuple[AuthToken, str]:
    """
    Returns (token_record, plaintext_token).
    Client receives plaintext_token, database stores only the hash.
    """
    settings = settings_service.get_settings()
    plaintext_token = generate_token()
    now = utcnow()

    record = AuthToken(
        user_id=user_id,
        token_hash=hash_token(plaintext_token),
        created_at=now,
        last_used_at=now,
        expires_at=now + timedelta(hours=settings.auto_logout_hours),
        user_agent=(user_agent or "")[:255] or None,
        ip_address=ip_address,
        is_revoked=False,
    )
    db.session.add(record)
    db.session.commit()
    return record, plaintext_token


def validate_token(token: str) -> User | None:
    """
    Returns the token's user, or None if the token is unknown, revoked,
    expired, or belongs to a deactivated account.
    """
    now = utcnow()
    record = db.session.query(AuthToken).filter_by(
        token_hash=hash_token(token),
        is_revoked=False,
    ).first()

    if not record:
        return None

    if record.expires_at < now:
        return None

    user = record.user
    if not user or not user.is_active:
        record.is_revoked = True
        record.revoked_at = now
        record.revoked_reason = "User account deactivated"
        db.session.commit()
        return None

    record.last_used_at = now
    db.session.commit()
    return user


def revoke_token(token: str, reason: str = "User logout") -> bool:
    """Returns True if a live token was revoked."""
    record = db.session.query(AuthToken).filter_by(
        token_hash=hash_token(token),
        is_revoked=False,
    ).first()

    if not record:
        return False

    record.is_revoked = True
    record.revoked_at = utcnow()
    record.revoked_reason = reason
    db.session.commit()
    return True


def revoke_all_user_tokens(user_id: int, reason: str = "Revoke all tokens") -> int:
    """Forces re-authentication everywhere, e.g. after a role change."""
    now = utcnow()
    records = db.session.query(AuthToken).filter_by(user_id=user_id, is_revoked=False).all()
    for record in records:
        record.is_revoked = True
        record.revoked_at = now
        record.revoked_reason = reason
    db.session.commit()
    return len(records)
