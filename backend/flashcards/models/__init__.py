"""SQLAlchemy models package."""
from flashcards.models.user import User
from flashcards.models.auth import RefreshToken
from flashcards.models.deck import Card, Deck, DeckType
from flashcards.models.study import CardReview, Rating, RetakeType, SessionType, StudySession

__all__ = [
    "User",
    "RefreshToken",
    "Deck",
    "DeckType",
    "Card",
    "StudySession",
    "SessionType",
    "RetakeType",
    "CardReview",
    "Rating",
]
