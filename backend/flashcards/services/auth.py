"""Registration, login, refresh-token rotation and logout.

Refresh token lifecycle::

    issued -> active -> rotated out (refresh) | revoked (logout) | expired
                     -> purged after the retention window
"""
import logging

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from flashcards.records import UserRecord
from flashcards.repositories import refresh_tokens, users
from flashcards.services.errors import (
    ServiceError,
    authentication_error,
    conflict_error,
    validation_error,
)
from flashcards.services.passwords import BCRYPT_MAX_BYTES, get_password_hasher
from flashcards.services.tokens import get_token_issuer

logger = logging.getLogger(__name__)

PASSWORD_MIN_LENGTH = 8
DISPLAY_NAME_MIN_LENGTH = 2
DISPLAY_NAME_MAX_LENGTH = 50


class TokenPair(BaseModel):
    access_token: str
    refresh_token: str
    access_token_expires_in: int
    refresh_token_expires_in: int

    class Config:
        frozen = True


class AuthResult(BaseModel):
    user: UserRecord
    tokens: TokenPair

    class Config:
        frozen = True


def invalid_credentials() -> ServiceError:
    # Same payload for unknown email and wrong password
    return authentication_error("INVALID_CREDENTIALS", "Invalid email or password")


def invalid_token() -> ServiceError:
    return authentication_error("INVALID_TOKEN", "Invalid or expired refresh token")


def validate_email_address(email: str) -> ServiceError | None:
    if not email:
        return validation_error("INVALID_EMAIL", "Email is required", "email")
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return validation_error("INVALID_EMAIL", "Invalid email format", "email")
    return None


def validate_password(password: str) -> ServiceError | None:
    if not password or not password.strip():
        return validation_error("INVALID_PASSWORD", "Password is required", "password")
    if len(password) < PASSWORD_MIN_LENGTH:
        return validation_error(
            "INVALID_PASSWORD", f"Password must be at least {PASSWORD_MIN_LENGTH} characters", "password"
        )
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        return validation_error(
            "INVALID_PASSWORD", f"Password must not exceed {BCRYPT_MAX_BYTES} bytes", "password"
        )
    return None


def validate_display_name(display_name: str) -> ServiceError | None:
    trimmed = (display_name or "").strip()
    if not trimmed:
        return validation_error("INVALID_DISPLAY_NAME", "Display name is required", "displayName")
    if len(trimmed) < DISPLAY_NAME_MIN_LENGTH:
        return validation_error(
            "INVALID_DISPLAY_NAME",
            f"Display name must be at least {DISPLAY_NAME_MIN_LENGTH} characters",
            "displayName",
        )
    if len(trimmed) > DISPLAY_NAME_MAX_LENGTH:
        return validation_error(
            "INVALID_DISPLAY_NAME",
            f"Display name must not exceed {DISPLAY_NAME_MAX_LENGTH} characters",
            "displayName",
        )
    return None


def _issue_tokens(
    db: Session,
    user: UserRecord,
    device_info: str | None,
    ip_address: str | None,
) -> TokenPair:
    """Mint an access token and persist a fresh refresh token."""
    issuer = get_token_issuer()
    refresh_token = issuer.generate_refresh_token()
    refresh_tokens.create(
        db,
        user_id=user.id,
        token=refresh_token,
        expires_at=issuer.refresh_token_expires_at(),
        device_info=device_info,
        ip_address=ip_address,
    )
    return TokenPair(
        access_token=issuer.generate_access_token(user.id, user.email),
        refresh_token=refresh_token,
        access_token_expires_in=issuer.access_token_expire_seconds,
        refresh_token_expires_in=issuer.refresh_token_expire_seconds,
    )


def register(
    db: Session,
    email: str,
    password: str,
    display_name: str,
    device_info: str | None = None,
    ip_address: str | None = None,
) -> AuthResult | ServiceError:
    """Create an account and sign it in."""
    normalized_email = users.normalize_email(email or "")
    error = (
        validate_email_address(normalized_email)
        or validate_password(password)
        or validate_display_name(display_name)
    )
    if error:
        return error

    email_taken = conflict_error("EMAIL_ALREADY_EXISTS", "This email is already registered", "email")
    if users.exists_by_email(db, normalized_email):
        return email_taken

    password_hash = get_password_hasher().hash(password)
    try:
        user = users.create(db, normalized_email, password_hash, display_name)
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        db.rollback()
        return email_taken

    tokens = _issue_tokens(db, user, device_info, ip_address)
    db.commit()
    logger.info(f"Registered user {user.id}")
    return AuthResult(user=user, tokens=tokens)


def login(
    db: Session,
    email: str,
    password: str,
    device_info: str | None = None,
    ip_address: str | None = None,
) -> AuthResult | ServiceError:
    """Authenticate with email and password."""
    if not (email or "").strip() or not (password or "").strip():
        return validation_error("MISSING_CREDENTIALS", "Email and password are required")

    hasher = get_password_hasher()
    stored_hash = users.get_password_hash(db, email)
    if stored_hash is None:
        hasher.verify_dummy(password)
        logger.info("Failed login: invalid credentials")
        return invalid_credentials()

    if not hasher.verify(password, stored_hash):
        logger.info("Failed login: invalid credentials")
        return invalid_credentials()

    user = users.find_by_email(db, email)
    if user is None:
        return invalid_credentials()

    tokens = _issue_tokens(db, user, device_info, ip_address)
    db.commit()
    logger.info(f"User {user.id} logged in")
    return AuthResult(user=user, tokens=tokens)


def refresh(
    db: Session,
    refresh_token: str,
    device_info: str | None = None,
    ip_address: str | None = None,
) -> TokenPair | ServiceError:
    """Rotate a refresh token: revoke the presented one and issue a new pair."""
    if not (refresh_token or "").strip():
        return validation_error("MISSING_TOKEN", "Refresh token is required")

    record = refresh_tokens.find_active(db, refresh_token)
    if record is None:
        logger.warning("Refresh attempted with an unknown, revoked or expired token")
        return invalid_token()

    if not refresh_tokens.revoke(db, refresh_token):
        # Another request rotated this token first
        db.rollback()
        logger.warning(f"Concurrent refresh token reuse for user {record.user_id}")
        return invalid_token()

    user = users.find_by_id(db, record.user_id)
    if user is None:
        db.commit()
        return invalid_token()

    tokens = _issue_tokens(db, user, device_info, ip_address)
    db.commit()
    logger.info(f"Rotated refresh token for user {user.id}")
    return tokens


def logout(db: Session, refresh_token: str | None) -> None:
    """Revoke a refresh token. Blank or unknown tokens are ignored."""
    if not (refresh_token or "").strip():
        return
    if refresh_tokens.revoke(db, refresh_token):
        db.commit()


def logout_all(db: Session, user_id: str) -> int:
    """Revoke every refresh token of a user; returns how many were active."""
    revoked = refresh_tokens.revoke_all_for_user(db, user_id)
    db.commit()
    logger.info(f"Revoked {revoked} refresh tokens for user {user_id}")
    return revoked
