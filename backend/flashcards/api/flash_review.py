"""Flash review endpoints."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from flashcards.api.deps import Principal, get_current_principal, get_db
from flashcards.api.errors import error_response
from flashcards.schemas.common import ErrorResponse
from flashcards.schemas.flash_review import (
    CompleteFlashReviewRequest,
    FlashReviewStatusResponse,
    FlashReviewSummaryResponse,
    StartFlashReviewResponse,
)
from flashcards.services import flash_review as flash_review_service
from flashcards.services.errors import ServiceError

router = APIRouter(tags=["flash-review"])

error_responses = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


@router.post(
    "/decks/{deck_id}/flash-review",
    response_model=StartFlashReviewResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses,
)
def start_flash_review(
    deck_id: str,
    shuffle: bool = True,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    result = flash_review_service.start(db, principal.user_id, deck_id, shuffle=shuffle)
    if isinstance(result, ServiceError):
        return error_response(result)
    return StartFlashReviewResponse.from_start(result)


@router.post(
    "/flash-review/{session_id}/complete",
    response_model=FlashReviewSummaryResponse,
    responses=error_responses,
)
def complete_flash_review(
    session_id: str,
    payload: CompleteFlashReviewRequest | None = None,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Complete a flash review. ``conceptsViewed`` defaults to the deck size."""
    concepts_viewed = payload.concepts_viewed if payload else None
    result = flash_review_service.complete(db, principal.user_id, session_id, concepts_viewed)
    if isinstance(result, ServiceError):
        return error_response(result)
    return FlashReviewSummaryResponse.from_summary(result)


@router.get(
    "/flash-review/{session_id}",
    response_model=FlashReviewStatusResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_flash_review(
    session_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    result = flash_review_service.get_status(db, principal.user_id, session_id)
    if isinstance(result, ServiceError):
        return error_response(result)
    return FlashReviewStatusResponse.from_status(result)
