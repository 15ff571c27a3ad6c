"""User model."""
import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Index, String
from sqlalchemy.orm import relationship

from flashcards.database import Base, utcnow


class User(Base):
    """User account."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "LENGTH(TRIM(display_name)) >= 2 AND LENGTH(display_name) <= 50",
            name="chk_users_display_name_length",
        ),
        Index("ix_users_created_at", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)  # stored trimmed + lowercased
    password_hash = Column(String(255), nullable=False)
    display_name = Column(String(50), nullable=False)
    email_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete-orphan")
    decks = relationship("Deck", back_populates="user", cascade="all, delete-orphan")
