"""Study session and card review models."""
import enum
import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from flashcards.database import Base, utcnow


class SessionType(str, enum.Enum):
    STUDY = "STUDY"
    FLASH_REVIEW = "FLASH_REVIEW"


class RetakeType(str, enum.Enum):
    ALL_CARDS = "ALL_CARDS"
    MISSED_ONLY = "MISSED_ONLY"


class Rating(str, enum.Enum):
    EASY = "EASY"
    HARD = "HARD"
    AGAIN = "AGAIN"


MISSED_RATINGS = (Rating.HARD.value, Rating.AGAIN.value)


class StudySession(Base):
    """One run through a deck, either a study session or a flash review."""

    __tablename__ = "study_sessions"
    __table_args__ = (
        CheckConstraint("session_type IN ('STUDY', 'FLASH_REVIEW')", name="chk_session_type"),
        CheckConstraint(
            "retake_type IS NULL OR retake_type IN ('ALL_CARDS', 'MISSED_ONLY')",
            name="chk_retake_type",
        ),
        CheckConstraint(
            "concepts_viewed IS NULL OR concepts_viewed >= 0",
            name="chk_concepts_viewed_non_negative",
        ),
        Index("ix_study_sessions_deck_type", "deck_id", "session_type"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    deck_id = Column(String(36), ForeignKey("decks.id", ondelete="CASCADE"), nullable=False, index=True)
    session_type = Column(String(20), nullable=False, default=SessionType.STUDY.value)
    started_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    completed_at = Column(DateTime(timezone=True))
    concepts_viewed = Column(Integer)  # flash review only
    parent_session_id = Column(
        String(36),
        ForeignKey("study_sessions.id", ondelete="SET NULL"),
        index=True,
    )
    retake_type = Column(String(20))

    # Relationships
    deck = relationship("Deck", back_populates="sessions")
    reviews = relationship("CardReview", back_populates="session", cascade="all, delete-orphan", passive_deletes=True)


class CardReview(Base):
    """A single rating event; a card may be rated several times per session."""

    __tablename__ = "card_reviews"
    __table_args__ = (
        CheckConstraint("rating IN ('EASY', 'HARD', 'AGAIN')", name="chk_card_reviews_rating"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    session_id = Column(String(36), ForeignKey("study_sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    card_id = Column(String(36), ForeignKey("cards.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(String(10), nullable=False)
    reviewed_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    session = relationship("StudySession", back_populates="reviews")
