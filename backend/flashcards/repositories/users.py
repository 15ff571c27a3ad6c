"""User storage: lookups, creation and profile statistics."""
from datetime import timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session

from flashcards.database import as_utc, utcnow
from flashcards.models.deck import Card, Deck
from flashcards.models.study import StudySession
from flashcards.models.user import User
from flashcards.records import UserRecord, UserStats


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _to_record(row: User) -> UserRecord:
    return UserRecord(
        id=row.id,
        email=row.email,
        display_name=row.display_name,
        email_verified=bool(row.email_verified),
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


def _email_matches(email: str):
    return func.lower(User.email) == normalize_email(email)


def find_by_id(db: Session, user_id: str) -> UserRecord | None:
    row = db.query(User).filter(User.id == user_id).first()
    return _to_record(row) if row else None


def find_by_email(db: Session, email: str) -> UserRecord | None:
    """Find a user by email, ignoring case and surrounding whitespace."""
    row = db.query(User).filter(_email_matches(email)).first()
    return _to_record(row) if row else None


def get_password_hash(db: Session, email: str) -> str | None:
    """Password hash for login; the only place the hash leaves the table."""
    row = db.query(User.password_hash).filter(_email_matches(email)).first()
    return row[0] if row else None


def exists_by_email(db: Session, email: str) -> bool:
    return db.query(User.id).filter(_email_matches(email)).first() is not None


def create(db: Session, email: str, password_hash: str, display_name: str) -> UserRecord:
    """Insert a user row. Raises IntegrityError on a duplicate email."""
    user = User(
        email=normalize_email(email),
        password_hash=password_hash,
        display_name=display_name.strip(),
        email_verified=False,
    )
    db.add(user)
    db.flush()
    return _to_record(user)


def update_display_name(db: Session, user_id: str, display_name: str) -> bool:
    updated = db.query(User).filter(User.id == user_id).update(
        {"display_name": display_name.strip(), "updated_at": utcnow()},
        synchronize_session=False,
    )
    return updated > 0


def get_stats(db: Session, user_id: str) -> UserStats:
    """Deck/card counts plus time spent in completed sessions."""
    deck_count = db.query(func.count(Deck.id)).filter(Deck.user_id == user_id).scalar() or 0
    card_count = (
        db.query(func.count(Card.id))
        .select_from(Card)
        .join(Deck, Card.deck_id == Deck.id)
        .filter(Deck.user_id == user_id)
        .scalar()
        or 0
    )

    completed = (
        db.query(StudySession.started_at, StudySession.completed_at)
        .select_from(StudySession)
        .join(Deck, StudySession.deck_id == Deck.id)
        .filter(Deck.user_id == user_id, StudySession.completed_at.is_not(None))
        .all()
    )
    total = timedelta()
    for started_at, completed_at in completed:
        elapsed = as_utc(completed_at) - as_utc(started_at)
        if elapsed > timedelta():
            total += elapsed

    return UserStats(
        deck_count=deck_count,
        card_count=card_count,
        completed_sessions=len(completed),
        total_study_time_minutes=int(total.total_seconds() // 60),
    )
