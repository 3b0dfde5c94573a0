"""Application error taxonomy.

Services and routers raise these to signal expected failures. Every class
fixes its HTTP status and whether its message is safe to show to clients
(``is_operational``). The handlers in main.py turn them into the standard
envelope: {"success": false, "error": {"message": ..., "statusCode": ...}}.
"""

from datetime import UTC, datetime
from enum import StrEnum


class ErrorKind(StrEnum):
    """Machine-readable category carried by every application error."""

    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    RATE_LIMIT = "rate_limit"
    DATABASE = "database"
    EXTERNAL_SERVICE = "external_service"
    INTERNAL = "internal"


class AppError(Exception):
    """Base class for all application errors."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, status_code: int = 500, is_operational: bool = True) -> None:
        self.message = message
        self.status_code = status_code
        self.is_operational = is_operational
        self.timestamp = datetime.now(UTC).isoformat()
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, status_code={self.status_code})"


class ValidationError(AppError):
    """Raised when input fails a business or format check.

    ``field`` names the offending input so clients can highlight it.
    """

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message, 400)


class AuthenticationError(AppError):
    kind = ErrorKind.AUTHENTICATION

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, 401)


class AuthorizationError(AppError):
    kind = ErrorKind.AUTHORIZATION

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message, 403)


class NotFoundError(AppError):
    """Raised when a requested entity does not exist (or is not visible to the caller)."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource: str | None = None) -> None:
        self.resource = resource
        super().__init__(f"{resource} not found" if resource else "Resource not found", 404)


class ConflictError(AppError):
    """Raised when an operation conflicts with existing state (e.g. duplicate)."""

    kind = ErrorKind.CONFLICT

    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class RateLimitError(AppError):
    """Raised when a client exceeds a request quota.

    ``retry_after`` is in seconds, when known.
    """

    kind = ErrorKind.RATE_LIMIT

    def __init__(self, message: str = "Too many requests", retry_after: int | None = None) -> None:
        self.retry_after = retry_after
        super().__init__(message, 429)


class DatabaseError(AppError):
    """Raised when the database fails. Never operational."""

    kind = ErrorKind.DATABASE

    def __init__(self, message: str = "Database operation failed") -> None:
        super().__init__(message, 500, is_operational=False)


class ExternalServiceError(AppError):
    """Raised when a third-party dependency fails. Never operational."""

    kind = ErrorKind.EXTERNAL_SERVICE

    def __init__(self, service: str, message: str | None = None) -> None:
        self.service = service
        super().__init__(message or f"External service {service} failed", 502, is_operational=False)


def is_operational_error(error: object) -> bool:
    """Return True only for application errors whose message is safe to expose."""
    if isinstance(error, AppError):
        return error.is_operational
    return False
