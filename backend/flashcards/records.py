"""Immutable value snapshots handed out by the repositories.

ORM rows never leave the repository modules; each repository decodes its rows
into one of these frozen models so callers get validated, UTC-normalized data
that cannot be mutated behind the session's back.
"""
from datetime import datetime

from pydantic import BaseModel

from flashcards.models.deck import DeckType
from flashcards.models.study import Rating, RetakeType, SessionType


class Record(BaseModel):
    class Config:
        frozen = True


class UserRecord(Record):
    """A user without the password hash."""

    id: str
    email: str
    display_name: str
    email_verified: bool
    created_at: datetime
    updated_at: datetime


class UserStats(Record):
    deck_count: int
    card_count: int
    completed_sessions: int
    total_study_time_minutes: int


class RefreshTokenRecord(Record):
    id: str
    user_id: str
    token: str
    expires_at: datetime
    revoked: bool
    revoked_at: datetime | None = None
    device_info: str | None = None
    ip_address: str | None = None
    created_at: datetime

    def is_active(self, now: datetime) -> bool:
        return not self.revoked and self.expires_at > now


class DeckRecord(Record):
    id: str
    user_id: str
    name: str
    deck_type: DeckType
    created_at: datetime
    updated_at: datetime


class CardRecord(Record):
    id: str
    deck_id: str
    front_text: str
    back_text: str | None = None
    created_at: datetime


class StudySessionRecord(Record):
    id: str
    deck_id: str
    session_type: SessionType
    started_at: datetime
    completed_at: datetime | None = None
    concepts_viewed: int | None = None
    parent_session_id: str | None = None
    retake_type: RetakeType | None = None

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None


class CardReviewRecord(Record):
    id: str
    session_id: str
    card_id: str
    rating: Rating
    reviewed_at: datetime
