"""Deck and card models."""
import enum
import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship

from flashcards.database import Base, utcnow


class DeckType(str, enum.Enum):
    STUDY = "STUDY"
    FLASH_REVIEW = "FLASH_REVIEW"


class Deck(Base):
    """A user's deck of cards."""

    __tablename__ = "decks"
    __table_args__ = (
        CheckConstraint("deck_type IN ('STUDY', 'FLASH_REVIEW')", name="chk_deck_type"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    deck_type = Column(String(20), nullable=False, default=DeckType.STUDY.value, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    user = relationship("User", back_populates="decks")
    cards = relationship("Card", back_populates="deck", cascade="all, delete-orphan", passive_deletes=True)
    sessions = relationship("StudySession", back_populates="deck", cascade="all, delete-orphan", passive_deletes=True)


class Card(Base):
    """A single card. Flash-review concepts may omit back_text (notes)."""

    __tablename__ = "cards"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    deck_id = Column(String(36), ForeignKey("decks.id", ondelete="CASCADE"), nullable=False, index=True)
    front_text = Column(String(500), nullable=False)
    back_text = Column(String(500))
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    deck = relationship("Deck", back_populates="cards")
