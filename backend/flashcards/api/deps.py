"""Request-scoped dependencies: database session and caller context.

Authentication state is never global. Each request gets a ``RequestContext``
built from its own headers and passed explicitly to the routes that need it.
"""
from dataclasses import dataclass
import logging

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from flashcards.database import get_db
from flashcards.services.tokens import TokenInvalid, get_token_issuer

__all__ = ["Principal", "RequestContext", "get_current_principal", "get_db", "get_request_context"]

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, taken from a valid access token."""

    user_id: str
    email: str


@dataclass(frozen=True)
class RequestContext:
    principal: Principal | None
    client_ip: str | None
    user_agent: str | None

    @property
    def is_authenticated(self) -> bool:
        return self.principal is not None


def get_request_ip(request: Request) -> str | None:
    """Extract best-effort client IP, preferring the first X-Forwarded-For entry."""
    xff = request.headers.get("x-forwarded-for")
    if xff:
        first = xff.split(",")[0].strip()
        if first:
            return first
    if request.client:
        return request.client.host
    return None


def get_request_context(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> RequestContext:
    """Build the caller context. Invalid tokens leave the request unauthenticated."""
    principal = None
    if credentials is not None:
        try:
            claims = get_token_issuer().validate_access_token(credentials.credentials)
        except TokenInvalid as exc:
            logger.debug(f"Ignoring invalid access token: {exc}")
        else:
            principal = Principal(user_id=claims.user_id, email=claims.email)

    return RequestContext(
        principal=principal,
        client_ip=get_request_ip(request),
        user_agent=request.headers.get("user-agent"),
    )


def get_current_principal(context: RequestContext = Depends(get_request_context)) -> Principal:
    """Require an authenticated caller."""
    if not context.is_authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return context.principal
