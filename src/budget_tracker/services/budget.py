"""Budget business logic."""

import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from budget_tracker.exceptions import ConflictError, NotFoundError
from budget_tracker.logging import get_logger
from budget_tracker.models import Budget, BudgetPeriod
from budget_tracker.repositories import budget as repo
from budget_tracker.services.category import require_visible_category

logger = get_logger(__name__)


async def list_budgets(db: AsyncSession, user_id: uuid.UUID) -> list[Budget]:
    return await repo.list_budgets(db, user_id)


async def get_budget(db: AsyncSession, user_id: uuid.UUID, budget_id: uuid.UUID) -> Budget:
    budget = await repo.get_budget(db, user_id, budget_id)
    if budget is None:
        raise NotFoundError("Budget")
    return budget


async def _ensure_unique(
    db: AsyncSession, user_id: uuid.UUID, category_id: uuid.UUID, period: BudgetPeriod
) -> None:
    if await repo.find_budget(db, user_id, category_id, period) is not None:
        raise _duplicate(period)


def _duplicate(period: BudgetPeriod) -> ConflictError:
    return ConflictError(f"A {period} budget already exists for this category")


async def create_budget(
    db: AsyncSession, user_id: uuid.UUID, *, category_id: uuid.UUID, amount: int, period: BudgetPeriod
) -> Budget:
    """Create a budget; one per (category, period) for each user."""
    await require_visible_category(db, user_id, category_id)
    await _ensure_unique(db, user_id, category_id, period)

    try:
        budget = await repo.add_budget(
            db, Budget(user_id=user_id, category_id=category_id, amount=amount, period=period)
        )
    except IntegrityError as exc:
        # A concurrent request inserted the same budget after the check above
        raise _duplicate(period) from exc
    logger.info("budget_created", budget_id=str(budget.id), period=str(period))
    return budget


async def update_budget(
    db: AsyncSession,
    user_id: uuid.UUID,
    budget_id: uuid.UUID,
    *,
    amount: int | None = None,
    period: BudgetPeriod | None = None,
) -> Budget:
    budget = await get_budget(db, user_id, budget_id)
    if period is not None and period != budget.period:
        await _ensure_unique(db, user_id, budget.category_id, period)
        budget.period = period
    if amount is not None:
        budget.amount = amount
    target_period = budget.period
    try:
        await db.flush()
    except IntegrityError as exc:
        raise _duplicate(target_period) from exc
    logger.info("budget_updated", budget_id=str(budget_id))
    return budget


async def delete_budget(db: AsyncSession, user_id: uuid.UUID, budget_id: uuid.UUID) -> None:
    budget = await get_budget(db, user_id, budget_id)
    await repo.delete_budget(db, budget)
    logger.info("budget_deleted", budget_id=str(budget_id))
