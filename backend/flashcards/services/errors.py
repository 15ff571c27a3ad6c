"""Service-level error values.

Service operations return either their result or a ``ServiceError``; they do
not raise for expected failures. The HTTP layer maps ``ErrorKind`` to a
status code and renders ``code``/``message``/``field`` as the error body.
"""
from dataclasses import dataclass
import enum


class ErrorKind(str, enum.Enum):
    VALIDATION = "VALIDATION"
    AUTHENTICATION = "AUTHENTICATION"
    CONFLICT = "CONFLICT"
    NOT_FOUND = "NOT_FOUND"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTHENTICATION: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
}


@dataclass(frozen=True)
class ServiceError:
    kind: ErrorKind
    code: str
    message: str
    field: str | None = None


def validation_error(code: str, message: str, field: str | None = None) -> ServiceError:
    return ServiceError(ErrorKind.VALIDATION, code, message, field)


def authentication_error(code: str, message: str) -> ServiceError:
    return ServiceError(ErrorKind.AUTHENTICATION, code, message)


def conflict_error(code: str, message: str, field: str | None = None) -> ServiceError:
    return ServiceError(ErrorKind.CONFLICT, code, message, field)


def not_found_error(code: str, message: str) -> ServiceError:
    return ServiceError(ErrorKind.NOT_FOUND, code, message)
