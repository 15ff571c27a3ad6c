"""Flash review: browse a concept deck once, then record how much was seen."""
from datetime import datetime
import logging
import random

from pydantic import BaseModel
from sqlalchemy.orm import Session

from flashcards.models.deck import DeckType
from flashcards.models.study import SessionType
from flashcards.records import CardRecord, DeckRecord, StudySessionRecord
from flashcards.repositories import decks, study
from flashcards.services.errors import ServiceError, conflict_error, not_found_error, validation_error

logger = logging.getLogger(__name__)


class Concept(BaseModel):
    id: str
    term: str
    notes: str | None = None
    has_notes: bool

    class Config:
        frozen = True

    @classmethod
    def from_card(cls, card: CardRecord) -> "Concept":
        return cls(
            id=card.id,
            term=card.front_text,
            notes=card.back_text,
            has_notes=bool(card.back_text and card.back_text.strip()),
        )


class FlashReviewStart(BaseModel):
    session: StudySessionRecord
    deck: DeckRecord
    concepts: list[Concept]

    class Config:
        frozen = True


class FlashReviewSummary(BaseModel):
    session_id: str
    deck_id: str
    deck_name: str
    total_concepts: int
    concepts_viewed: int
    started_at: datetime
    completed_at: datetime
    duration_seconds: int

    class Config:
        frozen = True


class FlashReviewStatus(BaseModel):
    session_id: str
    deck_id: str
    deck_name: str
    total_concepts: int
    started_at: datetime
    completed_at: datetime | None = None
    is_completed: bool

    class Config:
        frozen = True


def session_not_found() -> ServiceError:
    return not_found_error("SESSION_NOT_FOUND", "Flash review session not found")


def _find_flash_session(
    db: Session, user_id: str, session_id: str
) -> tuple[StudySessionRecord, DeckRecord] | None:
    session = study.find_session(db, session_id, user_id)
    if session is None or session.session_type != SessionType.FLASH_REVIEW:
        return None
    deck = decks.find_deck(db, session.deck_id, user_id)
    if deck is None:
        return None
    return session, deck


def start(db: Session, user_id: str, deck_id: str, shuffle: bool = True) -> FlashReviewStart | ServiceError:
    deck = decks.find_deck(db, deck_id, user_id)
    if deck is None:
        return not_found_error("DECK_NOT_FOUND", "Deck not found")
    if deck.deck_type != DeckType.FLASH_REVIEW:
        return validation_error(
            "INVALID_DECK_TYPE",
            f"Flash review requires a FLASH_REVIEW deck, got {deck.deck_type.value}",
        )

    cards = decks.find_cards(db, deck_id)
    if not cards:
        return validation_error("EMPTY_DECK", "Cannot review an empty deck")

    session = study.create_session(db, deck_id, session_type=SessionType.FLASH_REVIEW)
    db.commit()
    if shuffle:
        random.shuffle(cards)
    logger.info(f"Started flash review {session.id} on deck {deck_id}")
    return FlashReviewStart(
        session=session,
        deck=deck,
        concepts=[Concept.from_card(card) for card in cards],
    )


def complete(
    db: Session,
    user_id: str,
    session_id: str,
    concepts_viewed: int | None = None,
) -> FlashReviewSummary | ServiceError:
    """Complete a flash review exactly once.

    ``concepts_viewed`` defaults to the number of cards in the deck.
    """
    found = _find_flash_session(db, user_id, session_id)
    if found is None:
        return session_not_found()
    session, deck = found
    if session.is_completed:
        return conflict_error("SESSION_ALREADY_COMPLETED", "Session has already been completed")

    total_concepts = decks.count_cards(db, deck.id)
    viewed = total_concepts if concepts_viewed is None else concepts_viewed

    completed_at = study.complete_session(db, session_id, concepts_viewed=viewed)
    if completed_at is None:
        db.rollback()
        return conflict_error("SESSION_ALREADY_COMPLETED", "Session has already been completed")
    db.commit()
    logger.info(f"Completed flash review {session_id} ({viewed}/{total_concepts} concepts)")

    return FlashReviewSummary(
        session_id=session.id,
        deck_id=deck.id,
        deck_name=deck.name,
        total_concepts=total_concepts,
        concepts_viewed=viewed,
        started_at=session.started_at,
        completed_at=completed_at,
        duration_seconds=max(int((completed_at - session.started_at).total_seconds()), 0),
    )


def get_status(db: Session, user_id: str, session_id: str) -> FlashReviewStatus | ServiceError:
    found = _find_flash_session(db, user_id, session_id)
    if found is None:
        return session_not_found()
    session, deck = found
    return FlashReviewStatus(
        session_id=session.id,
        deck_id=deck.id,
        deck_name=deck.name,
        total_concepts=decks.count_cards(db, deck.id),
        started_at=session.started_at,
        completed_at=session.completed_at,
        is_completed=session.is_completed,
    )
