"""Budget data-access layer."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from budget_tracker.models import Budget, BudgetPeriod


async def list_budgets(db: AsyncSession, user_id: uuid.UUID) -> list[Budget]:
    """Return a user's budgets with their categories eagerly loaded."""
    stmt = (
        select(Budget)
        .options(selectinload(Budget.category))
        .where(Budget.user_id == user_id)
        .order_by(Budget.created_at, Budget.id)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_budget(db: AsyncSession, user_id: uuid.UUID, budget_id: uuid.UUID) -> Budget | None:
    stmt = (
        select(Budget)
        .options(selectinload(Budget.category))
        .where(Budget.id == budget_id, Budget.user_id == user_id)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def find_budget(
    db: AsyncSession, user_id: uuid.UUID, category_id: uuid.UUID, period: BudgetPeriod
) -> Budget | None:
    stmt = select(Budget).where(
        Budget.user_id == user_id,
        Budget.category_id == category_id,
        Budget.period == period,
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def add_budget(db: AsyncSession, budget: Budget) -> Budget:
    db.add(budget)
    await db.flush()
    await db.refresh(budget, attribute_names=["created_at", "category"])
    return budget


async def delete_budget(db: AsyncSession, budget: Budget) -> None:
    await db.delete(budget)
    await db.flush()
