"""Study session schemas."""
from datetime import datetime

from flashcards.models.study import Rating, RetakeType
from flashcards.records import CardRecord, CardReviewRecord
from flashcards.schemas.common import CamelModel
from flashcards.services.study import RetakeSession, SessionSummary, StudySessionStart


class StudyCardResponse(CamelModel):
    id: str
    front_text: str
    back_text: str

    @classmethod
    def from_record(cls, card: CardRecord) -> "StudyCardResponse":
        return cls(id=card.id, front_text=card.front_text, back_text=card.back_text or "")


class StartSessionResponse(CamelModel):
    session_id: str
    deck_id: str
    deck_name: str
    cards: list[StudyCardResponse]
    total_cards: int
    started_at: datetime

    @classmethod
    def from_start(cls, start: StudySessionStart) -> "StartSessionResponse":
        return cls(
            session_id=start.session.id,
            deck_id=start.deck.id,
            deck_name=start.deck.name,
            cards=[StudyCardResponse.from_record(card) for card in start.cards],
            total_cards=len(start.cards),
            started_at=start.session.started_at,
        )


class ReviewRequest(CamelModel):
    card_id: str
    rating: Rating


class ReviewResponse(CamelModel):
    id: str
    session_id: str
    card_id: str
    rating: Rating
    reviewed_at: datetime

    @classmethod
    def from_record(cls, review: CardReviewRecord) -> "ReviewResponse":
        return cls(
            id=review.id,
            session_id=review.session_id,
            card_id=review.card_id,
            rating=review.rating,
            reviewed_at=review.reviewed_at,
        )


class SessionSummaryResponse(CamelModel):
    session_id: str
    deck_id: str
    deck_name: str
    total_cards: int
    easy_count: int
    hard_count: int
    again_count: int
    missed_count: int
    parent_session_id: str | None = None
    retake_type: RetakeType | None = None
    started_at: datetime
    completed_at: datetime

    @classmethod
    def from_summary(cls, summary: SessionSummary) -> "SessionSummaryResponse":
        return cls(**summary.model_dump())


class RetakeMissedResponse(CamelModel):
    session_id: str
    deck_id: str
    deck_name: str
    parent_session_id: str
    retake_type: RetakeType
    cards: list[StudyCardResponse]
    total_cards: int
    original_session_cards: int
    started_at: datetime

    @classmethod
    def from_retake(cls, retake: RetakeSession) -> "RetakeMissedResponse":
        return cls(
            session_id=retake.session.id,
            deck_id=retake.deck.id,
            deck_name=retake.deck.name,
            parent_session_id=retake.session.parent_session_id,
            retake_type=retake.session.retake_type,
            cards=[StudyCardResponse.from_record(card) for card in retake.cards],
            total_cards=len(retake.cards),
            original_session_cards=retake.original_session_cards,
            started_at=retake.session.started_at,
        )
