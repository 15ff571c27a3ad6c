"""Study sessions: start, rate cards, complete with a summary, retake missed cards."""
from datetime import datetime
import logging
import random

from pydantic import BaseModel
from sqlalchemy.orm import Session

from flashcards.models.study import Rating, RetakeType, SessionType
from flashcards.records import CardRecord, CardReviewRecord, DeckRecord, StudySessionRecord
from flashcards.repositories import decks, study
from flashcards.services.errors import (
    ServiceError,
    conflict_error,
    not_found_error,
    validation_error,
)

logger = logging.getLogger(__name__)


class StudySessionStart(BaseModel):
    session: StudySessionRecord
    deck: DeckRecord
    cards: list[CardRecord]

    class Config:
        frozen = True


class SessionSummary(BaseModel):
    session_id: str
    deck_id: str
    deck_name: str
    easy_count: int
    hard_count: int
    again_count: int
    missed_count: int
    total_cards: int
    parent_session_id: str | None = None
    retake_type: RetakeType | None = None
    started_at: datetime
    completed_at: datetime

    class Config:
        frozen = True


class RetakeSession(BaseModel):
    session: StudySessionRecord
    deck: DeckRecord
    cards: list[CardRecord]
    original_session_cards: int

    class Config:
        frozen = True


def deck_not_found() -> ServiceError:
    return not_found_error("DECK_NOT_FOUND", "Deck not found")


def session_not_found() -> ServiceError:
    return not_found_error("SESSION_NOT_FOUND", "Study session not found")


def session_already_completed() -> ServiceError:
    return conflict_error("SESSION_ALREADY_COMPLETED", "Session has already been completed")


def _find_study_session(db: Session, user_id: str, session_id: str) -> StudySessionRecord | None:
    session = study.find_session(db, session_id, user_id)
    if session is None or session.session_type != SessionType.STUDY:
        return None
    return session


def start_session(db: Session, user_id: str, deck_id: str) -> StudySessionStart | ServiceError:
    """Open a study session with the deck's cards in a fresh random order."""
    deck = decks.find_deck(db, deck_id, user_id)
    if deck is None:
        return deck_not_found()

    cards = decks.find_cards(db, deck_id)
    if not cards:
        return validation_error("EMPTY_DECK", "Cannot study an empty deck")

    session = study.create_session(db, deck_id)
    db.commit()
    random.shuffle(cards)
    logger.info(f"Started study session {session.id} on deck {deck_id} with {len(cards)} cards")
    return StudySessionStart(session=session, deck=deck, cards=cards)


def submit_review(
    db: Session,
    user_id: str,
    session_id: str,
    card_id: str,
    rating: Rating,
) -> CardReviewRecord | ServiceError:
    """Record one rating. Repeat ratings of a card accumulate."""
    session = _find_study_session(db, user_id, session_id)
    if session is None:
        return session_not_found()

    if decks.find_card(db, session.deck_id, card_id) is None:
        return not_found_error("CARD_NOT_FOUND", "Card not found in this deck")

    review = study.create_review(db, session_id, card_id, rating)
    db.commit()
    return review


def complete_session(db: Session, user_id: str, session_id: str) -> SessionSummary | ServiceError:
    """Stamp completion once and summarize the ratings."""
    session = _find_study_session(db, user_id, session_id)
    deck = decks.find_deck(db, session.deck_id, user_id) if session else None
    if deck is None:
        return session_not_found()

    completed_at = study.complete_session(db, session_id)
    if completed_at is None:
        db.rollback()
        return session_already_completed()

    counts = study.get_review_counts(db, session_id)
    db.commit()
    logger.info(f"Completed study session {session_id}")

    return SessionSummary(
        session_id=session.id,
        deck_id=session.deck_id,
        deck_name=deck.name,
        easy_count=counts[Rating.EASY],
        hard_count=counts[Rating.HARD],
        again_count=counts[Rating.AGAIN],
        missed_count=counts[Rating.HARD] + counts[Rating.AGAIN],
        total_cards=sum(counts.values()),
        parent_session_id=session.parent_session_id,
        retake_type=session.retake_type,
        started_at=session.started_at,
        completed_at=completed_at,
    )


def retake_missed(db: Session, user_id: str, session_id: str) -> RetakeSession | ServiceError:
    """Start a follow-up session over the cards rated HARD or AGAIN.

    Cards deleted since the original session are left out.
    """
    parent = _find_study_session(db, user_id, session_id)
    deck = decks.find_deck(db, parent.deck_id, user_id) if parent else None
    if deck is None:
        return session_not_found()
    if not parent.is_completed:
        return validation_error("SESSION_NOT_COMPLETED", "Complete the session before retaking missed cards")

    # Reviews are deleted with their card, so deleted cards no longer count as missed
    if study.count_missed_cards(db, session_id) == 0:
        return validation_error(
            "NO_MISSED_CARDS",
            "No cards in this session were rated Hard or Again, or they have all been deleted",
        )
    cards = study.find_missed_cards(db, session_id)

    original_session_cards = study.count_total_reviews(db, session_id)
    session = study.create_session(
        db,
        parent.deck_id,
        parent_session_id=parent.id,
        retake_type=RetakeType.MISSED_ONLY,
    )
    db.commit()
    logger.info(f"Started retake session {session.id} from {parent.id} with {len(cards)} cards")
    return RetakeSession(session=session, deck=deck, cards=cards, original_session_cards=original_session_cards)
