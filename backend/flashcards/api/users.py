"""Current-user profile endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from flashcards.api.deps import Principal, get_current_principal, get_db
from flashcards.api.errors import error_response
from flashcards.schemas.common import ErrorResponse
from flashcards.schemas.user import UpdateUserRequest, UserProfileResponse
from flashcards.services import users as user_service
from flashcards.services.errors import ServiceError

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=UserProfileResponse, responses={404: {"model": ErrorResponse}})
def get_me(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    result = user_service.get_profile(db, principal.user_id)
    if isinstance(result, ServiceError):
        return error_response(result)
    user, stats = result
    return UserProfileResponse.from_profile(user, stats)


@router.patch(
    "/me",
    response_model=UserProfileResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def update_me(
    payload: UpdateUserRequest,
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Update the display name."""
    result = user_service.update_display_name(db, principal.user_id, payload.display_name)
    if isinstance(result, ServiceError):
        return error_response(result)
    user, stats = result
    return UserProfileResponse.from_profile(user, stats)
