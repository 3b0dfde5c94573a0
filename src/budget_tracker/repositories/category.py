"""Category data-access layer.

A category is visible to a user when it belongs to them or is global
(``user_id IS NULL``).
"""

import uuid

from sqlalchemy import ColumnElement, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from budget_tracker.models import Category, CategoryType


def _visible_to(user_id: uuid.UUID) -> ColumnElement[bool]:
    return or_(Category.user_id == user_id, Category.user_id.is_(None))


async def list_categories(
    db: AsyncSession, user_id: uuid.UUID, category_type: CategoryType | None = None
) -> list[Category]:
    """Return the categories visible to ``user_id``, ordered by name."""
    stmt = select(Category).where(_visible_to(user_id)).order_by(Category.name, Category.id)
    if category_type is not None:
        stmt = stmt.where(Category.type == category_type)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_visible_category(
    db: AsyncSession, user_id: uuid.UUID, category_id: uuid.UUID
) -> Category | None:
    stmt = select(Category).where(Category.id == category_id, _visible_to(user_id))
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def get_category(db: AsyncSession, category_id: uuid.UUID) -> Category | None:
    return await db.get(Category, category_id)


async def add_categories(db: AsyncSession, categories: list[Category]) -> list[Category]:
    db.add_all(categories)
    await db.flush()
    return categories


async def delete_category(db: AsyncSession, category: Category) -> None:
    await db.delete(category)
    await db.flush()
