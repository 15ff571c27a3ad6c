"""Study session endpoints."""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from flashcards.api.deps import Principal, get_current_principal, get_db
from flashcards.api.errors import error_response
from flashcards.schemas.common import ErrorResponse
from flashcards.schemas.study import (
    RetakeMissedResponse,
    ReviewRequest,
    ReviewResponse,
    SessionSummaryResponse,
    StartSessionResponse,
)
from flashcards.services import study as study_service
from flashcards.services.errors import ServiceError

router = APIRouter(tags=["study"])

error_responses = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


@router.post(
    "/decks/{deck_id}/study",
    response_model=StartSessionResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses,
)
def start_session(
    deck_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    result = study_service.start_session(db, principal.user_id, deck_id)
    if isinstance(result, ServiceError):
        return error_response(result)
    return StartSessionResponse.from_start(result)


@router.post(
    "/study/{session_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses,
)
def submit_review(
    session_id: str,
    payload: ReviewRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    result = study_service.submit_review(db, principal.user_id, session_id, payload.card_id, payload.rating)
    if isinstance(result, ServiceError):
        return error_response(result)
    return ReviewResponse.from_record(result)


@router.post("/study/{session_id}/complete", response_model=SessionSummaryResponse, responses=error_responses)
def complete_session(
    session_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Complete a session and return rating counts."""
    result = study_service.complete_session(db, principal.user_id, session_id)
    if isinstance(result, ServiceError):
        return error_response(result)
    return SessionSummaryResponse.from_summary(result)


@router.post(
    "/study/{session_id}/retake-missed",
    response_model=RetakeMissedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=error_responses,
)
def retake_missed(
    session_id: str,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Start a new session over the cards rated HARD or AGAIN in a completed one."""
    result = study_service.retake_missed(db, principal.user_id, session_id)
    if isinstance(result, ServiceError):
        return error_response(result)
    return RetakeMissedResponse.from_retake(result)
