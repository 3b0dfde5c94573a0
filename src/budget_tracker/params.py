"""Query-string parameter extraction for list endpoints.

Pagination never fails: missing or malformed values fall back to defaults
and out-of-range values are clamped. Only an explicitly disallowed sort
field is rejected.
"""

import re
from collections.abc import Collection, Mapping
from dataclasses import dataclass
from typing import Literal

from budget_tracker.exceptions import ValidationError

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
DEFAULT_SORT_FIELD = "createdAt"

RESERVED_KEYS = frozenset({"page", "limit", "sortBy", "sortOrder"})

# ASCII only; Arabic-Indic and other Unicode digits are not numbers here
_LEADING_INT = re.compile(r"\s*([+-]?)([0-9]+)", re.ASCII)

# Longer digit runs saturate instead of being converted
_MAX_DIGITS = 18
_SATURATED = 10**_MAX_DIGITS

# Largest OFFSET a 64-bit database integer can hold
MAX_OFFSET = 2**63 - 1

SortOrder = Literal["asc", "desc"]


@dataclass(frozen=True)
class PaginationParams:
    page: int
    limit: int
    offset: int


@dataclass(frozen=True)
class SortParams:
    sort_by: str
    sort_order: SortOrder


def _parse_int(raw: str | None, default: int) -> int:
    """Read the leading integer of ``raw`` ("12abc" -> 12), else ``default``.

    Magnitudes beyond 18 digits come back as +/-10**18.
    """
    if not raw:
        return default
    match = _LEADING_INT.match(raw)
    if match is None:
        return default
    sign, digits = match.group(1), match.group(2).lstrip("0") or "0"
    if len(digits) > _MAX_DIGITS:
        return -_SATURATED if sign == "-" else _SATURATED
    return int(sign + digits)


def parse_pagination(query: Mapping[str, str]) -> PaginationParams:
    """Derive page/limit/offset from ``page`` and ``limit``.

    page is at least 1 with no upper bound; a page past the end simply
    yields an empty result. limit is clamped to [1, 100]. offset never
    exceeds MAX_OFFSET.
    """
    page = max(1, _parse_int(query.get("page"), DEFAULT_PAGE))
    limit = min(MAX_LIMIT, max(1, _parse_int(query.get("limit"), DEFAULT_LIMIT)))
    return PaginationParams(page=page, limit=limit, offset=min((page - 1) * limit, MAX_OFFSET))


def parse_sort(query: Mapping[str, str], allowed_fields: Collection[str] = ()) -> SortParams:
    """Derive sort field and direction from ``sortBy`` and ``sortOrder``.

    Only the exact string "desc" sorts descending; anything else, "DESC"
    included, sorts ascending. An empty ``allowed_fields`` accepts any field.
    """
    sort_by = query.get("sortBy") or DEFAULT_SORT_FIELD
    sort_order: SortOrder = "desc" if query.get("sortOrder") == "desc" else "asc"

    if allowed_fields and sort_by not in allowed_fields:
        raise ValidationError(f"Invalid sort field: {sort_by}", field="sortBy")

    return SortParams(sort_by=sort_by, sort_order=sort_order)


def parse_filters(query: Mapping[str, str], allowed_filters: Collection[str] = ()) -> dict[str, str]:
    """Return every non-pagination, non-sort query parameter.

    With a non-empty ``allowed_filters``, other keys are dropped silently.
    """
    return {
        key: value
        for key, value in query.items()
        if key not in RESERVED_KEYS and (not allowed_filters or key in allowed_filters)
    }
