"""Authentication API endpoints."""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from flashcards.api.deps import Principal, RequestContext, get_current_principal, get_db, get_request_context
from flashcards.api.errors import error_response
from flashcards.schemas.auth import (
    AuthResponse,
    LoginRequest,
    LogoutRequest,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    TokensResponse,
)
from flashcards.schemas.common import ErrorResponse, MessageResponse
from flashcards.services import auth as auth_service
from flashcards.services.errors import ServiceError

router = APIRouter(prefix="/auth", tags=["auth"])

error_responses = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
}


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED, responses=error_responses)
def register(
    payload: RegisterRequest,
    context: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Register a new user and sign them in."""
    result = auth_service.register(
        db,
        email=payload.email,
        password=payload.password,
        display_name=payload.display_name,
        device_info=context.user_agent,
        ip_address=context.client_ip,
    )
    if isinstance(result, ServiceError):
        return error_response(result)
    return AuthResponse.from_result(result)


@router.post("/login", response_model=AuthResponse, responses=error_responses)
def login(
    payload: LoginRequest,
    context: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Login and get tokens."""
    result = auth_service.login(
        db,
        email=payload.email,
        password=payload.password,
        device_info=context.user_agent,
        ip_address=context.client_ip,
    )
    if isinstance(result, ServiceError):
        return error_response(result)
    return AuthResponse.from_result(result)


@router.post("/refresh", response_model=RefreshResponse, responses=error_responses)
def refresh_tokens(
    payload: RefreshRequest,
    context: RequestContext = Depends(get_request_context),
    db: Session = Depends(get_db),
):
    """Exchange a refresh token for a new token pair. The old token stops working."""
    result = auth_service.refresh(
        db,
        payload.refresh_token,
        device_info=context.user_agent,
        ip_address=context.client_ip,
    )
    if isinstance(result, ServiceError):
        return error_response(result)
    return RefreshResponse(tokens=TokensResponse.from_pair(result))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(payload: LogoutRequest | None = None, db: Session = Depends(get_db)):
    """Revoke a refresh token. Always succeeds."""
    auth_service.logout(db, payload.refresh_token if payload else None)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/logout-all", response_model=MessageResponse)
def logout_all(
    principal: Principal = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Revoke every refresh token of the current user."""
    revoked = auth_service.logout_all(db, principal.user_id)
    return MessageResponse(message=f"Logged out of {revoked} sessions")
