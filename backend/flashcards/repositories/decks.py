"""Read access to decks and cards for the study core."""
from sqlalchemy import func
from sqlalchemy.orm import Session

from flashcards.database import as_utc
from flashcards.models.deck import Card, Deck
from flashcards.records import CardRecord, DeckRecord


def _to_deck(row: Deck) -> DeckRecord:
    return DeckRecord(
        id=row.id,
        user_id=row.user_id,
        name=row.name,
        deck_type=row.deck_type,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


def to_card(row: Card) -> CardRecord:
    return CardRecord(
        id=row.id,
        deck_id=row.deck_id,
        front_text=row.front_text,
        back_text=row.back_text,
        created_at=as_utc(row.created_at),
    )


def find_deck(db: Session, deck_id: str, user_id: str) -> DeckRecord | None:
    """Find a deck owned by ``user_id``; other users' decks are invisible."""
    row = db.query(Deck).filter(Deck.id == deck_id, Deck.user_id == user_id).first()
    return _to_deck(row) if row else None


def find_cards(db: Session, deck_id: str) -> list[CardRecord]:
    rows = db.query(Card).filter(Card.deck_id == deck_id).order_by(Card.created_at.asc()).all()
    return [to_card(row) for row in rows]


def find_card(db: Session, deck_id: str, card_id: str) -> CardRecord | None:
    row = db.query(Card).filter(Card.id == card_id, Card.deck_id == deck_id).first()
    return to_card(row) if row else None


def count_cards(db: Session, deck_id: str) -> int:
    return db.query(func.count(Card.id)).filter(Card.deck_id == deck_id).scalar() or 0
