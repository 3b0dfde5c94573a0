"""Transaction business logic.

Turns raw query filters into typed criteria, enforces ownership and
category visibility, and packages list results as Page objects.
"""

import datetime as dt
import uuid
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from budget_tracker.exceptions import NotFoundError, ValidationError
from budget_tracker.logging import get_logger
from budget_tracker.models import Transaction
from budget_tracker.params import PaginationParams, SortParams
from budget_tracker.repositories import transaction as repo
from budget_tracker.repositories.transaction import TransactionCriteria
from budget_tracker.schemas.pagination import Page
from budget_tracker.services.category import require_visible_category

logger = get_logger(__name__)

SORT_FIELDS = tuple(repo.SORT_COLUMNS)
FILTER_FIELDS = ("categoryId", "type", "startDate", "endDate")
DIRECTIONS = ("income", "expense")


def _parse_date(name: str, raw: str | None) -> dt.date | None:
    if not raw:
        return None
    try:
        return dt.date.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError(f"{name} must be a date in YYYY-MM-DD format", field=name) from exc


def build_criteria(filters: dict[str, str]) -> TransactionCriteria:
    """Validate filter values taken from the query string.

    Raises:
        ValidationError: a filter value is malformed; ``field`` names the filter.
    """
    category_id = None
    if raw_category := filters.get("categoryId"):
        try:
            category_id = uuid.UUID(raw_category)
        except ValueError as exc:
            raise ValidationError("categoryId must be a valid UUID", field="categoryId") from exc

    direction = filters.get("type") or None
    if direction is not None and direction not in DIRECTIONS:
        raise ValidationError("type must be one of: income, expense", field="type")

    start_date = _parse_date("startDate", filters.get("startDate"))
    end_date = _parse_date("endDate", filters.get("endDate"))
    if start_date and end_date and start_date > end_date:
        raise ValidationError("startDate must not be after endDate", field="startDate")

    return TransactionCriteria(
        category_id=category_id,
        direction=direction,  # type: ignore[arg-type]
        start_date=start_date,
        end_date=end_date,
    )


async def list_transactions(
    db: AsyncSession,
    user_id: uuid.UUID,
    pagination: PaginationParams,
    sort: SortParams,
    filters: dict[str, str],
) -> Page[Transaction]:
    """Fetch one page of the user's transactions plus the filtered total.

    The count runs first; a page past the end skips the page query.
    """
    criteria = build_criteria(filters)
    total = await repo.count_transactions(db, user_id, criteria)
    if pagination.offset >= total:
        return Page(items=[], total=total, page=pagination.page, limit=pagination.limit)

    items = await repo.list_transactions(
        db,
        user_id,
        criteria,
        offset=pagination.offset,
        limit=pagination.limit,
        sort_by=sort.sort_by,
        sort_order=sort.sort_order,
    )
    return Page(items=items, total=total, page=pagination.page, limit=pagination.limit)


async def get_transaction(db: AsyncSession, user_id: uuid.UUID, transaction_id: uuid.UUID) -> Transaction:
    transaction = await repo.get_transaction(db, user_id, transaction_id)
    if transaction is None:
        raise NotFoundError("Transaction")
    return transaction


async def create_transaction(
    db: AsyncSession,
    user_id: uuid.UUID,
    *,
    amount: int,
    category_id: uuid.UUID,
    date: dt.date,
    note: str | None,
) -> Transaction:
    await require_visible_category(db, user_id, category_id)
    transaction = await repo.add_transaction(
        db,
        Transaction(user_id=user_id, amount=amount, category_id=category_id, date=date, note=note or None),
    )
    logger.info("transaction_created", transaction_id=str(transaction.id), amount=amount)
    return transaction


async def update_transaction(
    db: AsyncSession, user_id: uuid.UUID, transaction_id: uuid.UUID, changes: dict[str, Any]
) -> Transaction:
    """Apply a partial update. ``changes`` holds only the fields the client sent."""
    transaction = await get_transaction(db, user_id, transaction_id)

    if changes.get("category_id") is not None:
        await require_visible_category(db, user_id, changes["category_id"])

    for field, value in changes.items():
        if value is None and field != "note":
            continue
        setattr(transaction, field, value)
    await db.flush()

    logger.info("transaction_updated", transaction_id=str(transaction_id), fields=sorted(changes))
    return transaction


async def delete_transaction(db: AsyncSession, user_id: uuid.UUID, transaction_id: uuid.UUID) -> None:
    transaction = await get_transaction(db, user_id, transaction_id)
    await repo.delete_transaction(db, transaction)
    logger.info("transaction_deleted", transaction_id=str(transaction_id))
