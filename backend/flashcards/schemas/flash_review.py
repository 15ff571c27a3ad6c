"""Flash review schemas."""
from datetime import datetime

from pydantic import Field

from flashcards.schemas.common import CamelModel
from flashcards.services.flash_review import FlashReviewStart, FlashReviewStatus, FlashReviewSummary


class ConceptResponse(CamelModel):
    id: str
    term: str
    notes: str | None = None
    has_notes: bool


class StartFlashReviewResponse(CamelModel):
    session_id: str
    deck_id: str
    deck_name: str
    concepts: list[ConceptResponse]
    total_concepts: int
    started_at: datetime

    @classmethod
    def from_start(cls, start: FlashReviewStart) -> "StartFlashReviewResponse":
        return cls(
            session_id=start.session.id,
            deck_id=start.deck.id,
            deck_name=start.deck.name,
            concepts=[ConceptResponse(**concept.model_dump()) for concept in start.concepts],
            total_concepts=len(start.concepts),
            started_at=start.session.started_at,
        )


class CompleteFlashReviewRequest(CamelModel):
    concepts_viewed: int | None = Field(None, ge=0)


class FlashReviewSummaryResponse(CamelModel):
    session_id: str
    deck_id: str
    deck_name: str
    total_concepts: int
    concepts_viewed: int
    started_at: datetime
    completed_at: datetime
    duration_seconds: int

    @classmethod
    def from_summary(cls, summary: FlashReviewSummary) -> "FlashReviewSummaryResponse":
        return cls(**summary.model_dump())


class FlashReviewStatusResponse(CamelModel):
    session_id: str
    deck_id: str
    deck_name: str
    total_concepts: int
    started_at: datetime
    completed_at: datetime | None = None
    is_completed: bool

    @classmethod
    def from_status(cls, status: FlashReviewStatus) -> "FlashReviewStatusResponse":
        return cls(**status.model_dump())
