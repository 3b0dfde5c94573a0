"""Response envelope builders.

Routers return these instead of bare models so every endpoint, success or
failure, produces the same envelope (see schemas/envelope.py). Exception
handlers in main.py call ``error_response`` for anything raised.
"""

import math
from datetime import UTC, datetime
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from pydantic import ValidationError as SchemaValidationError
from starlette.requests import Request
from starlette.responses import Response

from budget_tracker.config import settings
from budget_tracker.exceptions import AppError, RateLimitError, ValidationError
from budget_tracker.logging import get_logger
from budget_tracker.schemas.envelope import (
    ErrorDetail,
    ErrorResponse,
    FieldError,
    PaginationMeta,
    SuccessResponse,
)

logger = get_logger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"
UNKNOWN_ERROR_MESSAGE = "An unexpected error occurred"


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _success_content(data: Any, message: str | None, meta: PaginationMeta | None) -> dict[str, Any]:
    fields: dict[str, Any] = {"success": True, "data": jsonable_encoder(data, by_alias=True)}
    if message:
        fields["message"] = message
    if meta is not None:
        fields["meta"] = meta
    envelope = SuccessResponse[Any](**fields)
    return envelope.model_dump(mode="json", by_alias=True, exclude_unset=True)


def success_response(
    data: Any,
    message: str | None = None,
    meta: PaginationMeta | None = None,
) -> JSONResponse:
    """Wrap ``data`` in a 200 success envelope."""
    return JSONResponse(status_code=200, content=_success_content(data, message, meta))


def created_response(data: Any, message: str = "Resource created successfully") -> JSONResponse:
    """Wrap ``data`` in a 201 success envelope."""
    return JSONResponse(status_code=201, content=_success_content(data, message, None))


def no_content_response() -> Response:
    """Empty 204 response."""
    return Response(status_code=204)


def paginated_response(
    data: list[Any],
    page: int,
    limit: int,
    total: int,
    message: str | None = None,
) -> JSONResponse:
    """Wrap one page of results with page/limit/total/totalPages metadata.

    ``limit`` must be positive; callers get it from ``parse_pagination``.
    """
    meta = PaginationMeta(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit))
    return success_response(data, message, meta)


def _app_error_detail(error: AppError) -> ErrorDetail:
    message = error.message
    if not error.is_operational:
        logger.error("non_operational_error", error_kind=error.kind, error=error.message, exc_info=error)
        if settings.is_production:
            message = GENERIC_ERROR_MESSAGE

    fields: dict[str, Any] = {
        "message": message,
        "status_code": error.status_code,
        "timestamp": error.timestamp,
    }
    if isinstance(error, ValidationError) and error.field:
        fields["field"] = error.field
    if isinstance(error, RateLimitError) and error.retry_after is not None:
        fields["retry_after"] = error.retry_after
    return ErrorDetail(**fields)


def _field_path(loc: tuple[int | str, ...]) -> str:
    return ".".join(str(part) for part in loc)


def _schema_error_detail(error: SchemaValidationError | RequestValidationError) -> ErrorDetail:
    issues = []
    for issue in error.errors():
        loc = tuple(issue.get("loc", ()))
        # FastAPI prefixes the location with where the value came from
        if isinstance(error, RequestValidationError) and loc and loc[0] in ("body", "query", "path"):
            loc = loc[1:]
        issues.append(FieldError(field=_field_path(loc), message=issue["msg"]))
    return ErrorDetail(
        message="Validation failed",
        status_code=400,
        timestamp=_now(),
        errors=issues,
    )


def handle_error(error: object) -> ErrorResponse:
    """Format any raised value as an error envelope.

    Application errors keep their own status and message. Other exceptions
    become a 500 whose message is only shown outside production. Values that
    are not exceptions at all get a fixed message.
    """
    if isinstance(error, AppError):
        return ErrorResponse(success=False, error=_app_error_detail(error))

    if isinstance(error, SchemaValidationError | RequestValidationError):
        return ErrorResponse(success=False, error=_schema_error_detail(error))

    if isinstance(error, BaseException):
        logger.error("unexpected_error", error_type=type(error).__name__, exc_info=error)
        message = GENERIC_ERROR_MESSAGE if settings.is_production else str(error)
        detail = ErrorDetail(message=message or GENERIC_ERROR_MESSAGE, status_code=500, timestamp=_now())
        return ErrorResponse(success=False, error=detail)

    logger.error("unknown_error", value=repr(error))
    detail = ErrorDetail(message=UNKNOWN_ERROR_MESSAGE, status_code=500, timestamp=_now())
    return ErrorResponse(success=False, error=detail)


def error_response(error: object, status_code: int | None = None) -> JSONResponse:
    """Build the error envelope response for ``error``.

    The HTTP status is the error's own status code; an explicit
    ``status_code`` overrides it and is reflected in the envelope too.
    """
    envelope = handle_error(error)
    if status_code is not None:
        envelope.error.status_code = status_code
    return JSONResponse(status_code=envelope.error.status_code, content=envelope.to_content())


class ApiResponseBuilder[T]:
    """Fluent builder for success responses that need custom status or headers.

    Example:
        return (
            ApiResponseBuilder[list[BudgetResponse]]()
            .set_data(budgets)
            .set_message("Budgets retrieved")
            .set_header("Cache-Control", "no-store")
            .build()
        )
    """

    def __init__(self) -> None:
        self._data: T | None = None
        self._message: str | None = None
        self._meta: PaginationMeta | None = None
        self._status_code = 200
        self._headers: dict[str, str] = {}

    def set_data(self, data: T) -> "ApiResponseBuilder[T]":
        self._data = data
        return self

    def set_message(self, message: str) -> "ApiResponseBuilder[T]":
        self._message = message
        return self

    def set_meta(self, meta: PaginationMeta) -> "ApiResponseBuilder[T]":
        self._meta = meta
        return self

    def set_status_code(self, status_code: int) -> "ApiResponseBuilder[T]":
        self._status_code = status_code
        return self

    def set_header(self, key: str, value: str) -> "ApiResponseBuilder[T]":
        self._headers[key] = value
        return self

    def build(self) -> JSONResponse:
        return JSONResponse(
            status_code=self._status_code,
            content=_success_content(self._data, self._message, self._meta),
            headers=dict(self._headers),
        )


async def validate_request_body[ModelT: BaseModel](request: Request, schema: type[ModelT]) -> ModelT:
    """Parse the JSON body of ``request`` into ``schema``.

    Schema failures propagate as pydantic's ValidationError so the error
    handler can list the offending fields. A body that is not JSON at all
    raises ValidationError("Invalid request body").
    """
    try:
        payload = await request.json()
    except ValueError as exc:
        raise ValidationError("Invalid request body") from exc
    return schema.model_validate(payload)
