"""Response envelope schemas.

Every response body is exactly one of two shapes:

    {"success": true, "data": ..., "message"?: ..., "meta"?: {...}}
    {"success": false, "error": {"message", "statusCode", "timestamp", ...}}

Optional keys are left unset when absent and dumped with ``exclude_unset``,
so they are omitted from the JSON rather than sent as null.
"""

from typing import Any, Literal

from budget_tracker.schemas.base import CamelModel


class PaginationMeta(CamelModel):
    """Page metadata attached to list responses."""

    page: int
    limit: int
    total: int
    total_pages: int


class SuccessResponse[T](CamelModel):
    success: Literal[True] = True
    data: T
    message: str | None = None
    meta: PaginationMeta | None = None


class FieldError(CamelModel):
    """One failed field from a schema validation."""

    field: str
    message: str


class ErrorDetail(CamelModel):
    """Inner error object. ``status_code`` mirrors the HTTP status."""

    message: str
    status_code: int
    timestamp: str
    field: str | None = None
    retry_after: int | None = None
    errors: list[FieldError] | None = None


class ErrorResponse(CamelModel):
    success: Literal[False] = False
    error: ErrorDetail

    def to_content(self) -> dict[str, Any]:
        """Dump to the JSON-ready dict sent over the wire."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)
