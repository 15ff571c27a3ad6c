"""Authentication schemas."""
from datetime import datetime

from flashcards.records import UserRecord
from flashcards.schemas.common import CamelModel
from flashcards.services.auth import AuthResult, TokenPair


class RegisterRequest(CamelModel):
    """User registration request. Field rules are enforced by the auth service."""

    email: str = ""
    password: str = ""
    display_name: str = ""


class LoginRequest(CamelModel):
    email: str = ""
    password: str = ""


class RefreshRequest(CamelModel):
    refresh_token: str = ""


class LogoutRequest(CamelModel):
    refresh_token: str | None = None


class TokensResponse(CamelModel):
    access_token: str
    refresh_token: str
    access_token_expires_in: int
    refresh_token_expires_in: int
    token_type: str = "Bearer"

    @classmethod
    def from_pair(cls, tokens: TokenPair) -> "TokensResponse":
        return cls(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            access_token_expires_in=tokens.access_token_expires_in,
            refresh_token_expires_in=tokens.refresh_token_expires_in,
        )


class UserResponse(CamelModel):
    """User info response."""

    id: str
    email: str
    display_name: str
    email_verified: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_record(cls, user: UserRecord) -> "UserResponse":
        return cls(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            email_verified=user.email_verified,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class AuthResponse(CamelModel):
    user: UserResponse
    tokens: TokensResponse

    @classmethod
    def from_result(cls, result: AuthResult) -> "AuthResponse":
        return cls(user=UserResponse.from_record(result.user), tokens=TokensResponse.from_pair(result.tokens))


class RefreshResponse(CamelModel):
    tokens: TokensResponse
