"""Access and refresh token issuance.

Access tokens are short-lived HS256 JWTs validated purely by signature,
issuer and expiry; they are never looked up in the database and cannot be
revoked individually. Refresh tokens are opaque random strings that only mean
something as a key into the refresh token store.
"""
from datetime import datetime, timedelta
from functools import lru_cache
import secrets
import uuid

from jose import JWTError, jwt
from pydantic import BaseModel

from flashcards.config import get_settings
from flashcards.database import utcnow

REFRESH_TOKEN_BYTES = 32


class TokenInvalid(Exception):
    """Raised when an access token fails signature, issuer, expiry or claim checks."""


class AccessClaims(BaseModel):
    user_id: str
    email: str
    issuer: str
    issued_at: datetime
    expires_at: datetime

    class Config:
        frozen = True


class TokenIssuer:
    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        issuer: str = "flashcards-api",
        access_token_expire_seconds: int = 900,
        refresh_token_expire_seconds: int = 30 * 24 * 60 * 60,
    ):
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.issuer = issuer
        self.access_token_expire_seconds = access_token_expire_seconds
        self.refresh_token_expire_seconds = refresh_token_expire_seconds

    def generate_access_token(self, user_id: str, email: str, now: datetime | None = None) -> str:
        """Create a signed access token for a user."""
        issued_at = now or utcnow()
        expire = issued_at + timedelta(seconds=self.access_token_expire_seconds)
        to_encode = {
            "sub": str(user_id),
            "email": email,
            "iss": self.issuer,
            "iat": issued_at,
            "exp": expire,
        }
        return jwt.encode(to_encode, self._secret_key, algorithm=self.algorithm)

    def validate_access_token(self, token: str) -> AccessClaims:
        """Decode and verify an access token.

        Raises:
            TokenInvalid: bad signature, wrong issuer, expired, or malformed claims.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                issuer=self.issuer,
                options={"require_exp": True, "require_iat": True, "require_sub": True},
            )
        except JWTError as exc:
            raise TokenInvalid(str(exc)) from exc

        subject = payload.get("sub")
        email = payload.get("email")
        if not isinstance(email, str) or not email:
            raise TokenInvalid("Missing email claim")
        try:
            uuid.UUID(subject)
        except (TypeError, ValueError) as exc:
            raise TokenInvalid("Malformed subject") from exc

        return AccessClaims(
            user_id=subject,
            email=email,
            issuer=payload["iss"],
            issued_at=payload["iat"],
            expires_at=payload["exp"],
        )

    def generate_refresh_token(self) -> str:
        """256 bits of randomness, hex encoded (64 characters)."""
        return secrets.token_hex(REFRESH_TOKEN_BYTES)

    def refresh_token_expires_at(self, now: datetime | None = None) -> datetime:
        return (now or utcnow()) + timedelta(seconds=self.refresh_token_expire_seconds)


@lru_cache
def get_token_issuer() -> TokenIssuer:
    settings = get_settings()
    return TokenIssuer(
        secret_key=settings.secret_key,
        algorithm=settings.algorithm,
        issuer=settings.jwt_issuer,
        access_token_expire_seconds=settings.access_token_expire_seconds,
        refresh_token_expire_seconds=settings.refresh_token_expire_seconds,
    )
