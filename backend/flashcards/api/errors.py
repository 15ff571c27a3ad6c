"""Error boundary: every failure leaves the API as ``{error, message, field?}``."""
from http import HTTPStatus
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from flashcards.schemas.common import ErrorResponse
from flashcards.services.errors import ServiceError

logger = logging.getLogger(__name__)


def error_body(error: str, message: str, field: str | None = None) -> dict:
    return ErrorResponse(error=error, message=message, field=field).model_dump(exclude_none=True)


def error_response(error: ServiceError) -> JSONResponse:
    """Render a service error with the status code of its kind."""
    return JSONResponse(
        status_code=error.kind.status_code,
        content=error_body(error.code, error.message, error.field),
    )


def _validation_field(exc: RequestValidationError) -> str | None:
    errors = exc.errors()
    if not errors:
        return None
    location = [str(part) for part in errors[0].get("loc", ()) if part not in ("body", "query", "path")]
    return ".".join(location) or None


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("VALIDATION_ERROR", message, _validation_field(exc)),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        content = error_body("UNAUTHORIZED", "Authentication required")
    else:
        try:
            name = HTTPStatus(exc.status_code).name
        except ValueError:
            name = "ERROR"
        content = error_body(name, str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=content, headers=getattr(exc, "headers", None))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("INTERNAL_ERROR", "An unexpected error occurred"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
