"""Refresh token storage with single-use rotation semantics.

A token is active iff it is not revoked and has not expired. Revocation is a
conditional UPDATE so concurrent rotations of the same token resolve in the
database: exactly one caller sees ``True``.
"""
from datetime import datetime, timedelta

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from flashcards.database import as_utc, utcnow
from flashcards.models.auth import RefreshToken
from flashcards.records import RefreshTokenRecord


def _to_record(row: RefreshToken) -> RefreshTokenRecord:
    return RefreshTokenRecord(
        id=row.id,
        user_id=row.user_id,
        token=row.token,
        expires_at=as_utc(row.expires_at),
        revoked=bool(row.revoked),
        revoked_at=as_utc(row.revoked_at),
        device_info=row.device_info,
        ip_address=row.ip_address,
        created_at=as_utc(row.created_at),
    )


def create(
    db: Session,
    user_id: str,
    token: str,
    expires_at: datetime,
    device_info: str | None = None,
    ip_address: str | None = None,
) -> RefreshTokenRecord:
    row = RefreshToken(
        user_id=user_id,
        token=token,
        expires_at=expires_at,
        revoked=False,
        device_info=device_info[:255] if device_info else None,
        ip_address=ip_address[:45] if ip_address else None,
    )
    db.add(row)
    db.flush()
    return _to_record(row)


def find_active(db: Session, token: str, now: datetime | None = None) -> RefreshTokenRecord | None:
    """Return the token row only if it is neither revoked nor expired."""
    now = now or utcnow()
    row = db.query(RefreshToken).filter(
        RefreshToken.token == token,
        RefreshToken.revoked.is_(False),
        RefreshToken.expires_at > now,
    ).first()
    return _to_record(row) if row else None


def revoke(db: Session, token: str) -> bool:
    """Revoke a token. Revoking an already-revoked or unknown token returns False."""
    updated = db.query(RefreshToken).filter(
        RefreshToken.token == token,
        RefreshToken.revoked.is_(False),
    ).update(
        {"revoked": True, "revoked_at": utcnow()},
        synchronize_session=False,
    )
    return updated > 0


def revoke_all_for_user(db: Session, user_id: str) -> int:
    """Revoke every outstanding token of a user (log out everywhere)."""
    return db.query(RefreshToken).filter(
        RefreshToken.user_id == user_id,
        RefreshToken.revoked.is_(False),
    ).update(
        {"revoked": True, "revoked_at": utcnow()},
        synchronize_session=False,
    )


def purge_expired_and_revoked(db: Session, retention: timedelta, now: datetime | None = None) -> int:
    """Delete rows that expired or were revoked more than ``retention`` ago."""
    cutoff = (now or utcnow()) - retention
    return db.query(RefreshToken).filter(
        or_(
            RefreshToken.expires_at < cutoff,
            and_(RefreshToken.revoked.is_(True), RefreshToken.revoked_at < cutoff),
        )
    ).delete(synchronize_session=False)
