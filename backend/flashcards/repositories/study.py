"""Study session and card review storage, including rating aggregates."""
from datetime import datetime
import random

from sqlalchemy import func
from sqlalchemy.orm import Session

from flashcards.database import as_utc, utcnow
from flashcards.models.deck import Card, Deck
from flashcards.models.study import MISSED_RATINGS, CardReview, Rating, RetakeType, SessionType, StudySession
from flashcards.records import CardRecord, CardReviewRecord, StudySessionRecord
from flashcards.repositories.decks import to_card


def _to_session(row: StudySession) -> StudySessionRecord:
    return StudySessionRecord(
        id=row.id,
        deck_id=row.deck_id,
        session_type=row.session_type,
        started_at=as_utc(row.started_at),
        completed_at=as_utc(row.completed_at),
        concepts_viewed=row.concepts_viewed,
        parent_session_id=row.parent_session_id,
        retake_type=row.retake_type,
    )


def _to_review(row: CardReview) -> CardReviewRecord:
    return CardReviewRecord(
        id=row.id,
        session_id=row.session_id,
        card_id=row.card_id,
        rating=row.rating,
        reviewed_at=as_utc(row.reviewed_at),
    )


def create_session(
    db: Session,
    deck_id: str,
    session_type: SessionType = SessionType.STUDY,
    parent_session_id: str | None = None,
    retake_type: RetakeType | None = None,
) -> StudySessionRecord:
    row = StudySession(
        deck_id=deck_id,
        session_type=session_type.value,
        started_at=utcnow(),
        parent_session_id=parent_session_id,
        retake_type=retake_type.value if retake_type else None,
    )
    db.add(row)
    db.flush()
    return _to_session(row)


def find_session(db: Session, session_id: str, user_id: str) -> StudySessionRecord | None:
    """Find a session whose deck belongs to ``user_id``."""
    row = (
        db.query(StudySession)
        .join(Deck, StudySession.deck_id == Deck.id)
        .filter(StudySession.id == session_id, Deck.user_id == user_id)
        .first()
    )
    return _to_session(row) if row else None


def create_review(db: Session, session_id: str, card_id: str, rating: Rating) -> CardReviewRecord:
    row = CardReview(session_id=session_id, card_id=card_id, rating=rating.value, reviewed_at=utcnow())
    db.add(row)
    db.flush()
    return _to_review(row)


def complete_session(db: Session, session_id: str, concepts_viewed: int | None = None) -> datetime | None:
    """Stamp the completion time once.

    Returns the completion time, or None if the session was already completed
    (or does not exist).
    """
    now = utcnow()
    values = {"completed_at": now}
    if concepts_viewed is not None:
        values["concepts_viewed"] = concepts_viewed

    updated = db.query(StudySession).filter(
        StudySession.id == session_id,
        StudySession.completed_at.is_(None),
    ).update(values, synchronize_session=False)
    return now if updated else None


def get_review_counts(db: Session, session_id: str) -> dict[Rating, int]:
    """Reviews per rating bucket; buckets with no reviews report zero."""
    counts = {rating: 0 for rating in Rating}
    rows = (
        db.query(CardReview.rating, func.count(CardReview.id))
        .filter(CardReview.session_id == session_id)
        .group_by(CardReview.rating)
        .all()
    )
    for rating, count in rows:
        counts[Rating(rating)] = count
    return counts


def find_missed_cards(db: Session, session_id: str) -> list[CardRecord]:
    """Distinct cards rated HARD or AGAIN that still exist, in random order."""
    rows = (
        db.query(Card)
        .join(CardReview, CardReview.card_id == Card.id)
        .filter(CardReview.session_id == session_id, CardReview.rating.in_(MISSED_RATINGS))
        .distinct()
        .all()
    )
    cards = [to_card(row) for row in rows]
    random.shuffle(cards)
    return cards


def count_missed_cards(db: Session, session_id: str) -> int:
    return (
        db.query(func.count(func.distinct(Card.id)))
        .select_from(Card)
        .join(CardReview, CardReview.card_id == Card.id)
        .filter(CardReview.session_id == session_id, CardReview.rating.in_(MISSED_RATINGS))
        .scalar()
        or 0
    )


def count_total_reviews(db: Session, session_id: str) -> int:
    """Number of distinct cards reviewed in a session."""
    return (
        db.query(func.count(func.distinct(CardReview.card_id)))
        .filter(CardReview.session_id == session_id)
        .scalar()
        or 0
    )
