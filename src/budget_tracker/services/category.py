"""Category business logic."""

import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from budget_tracker.exceptions import AuthorizationError, NotFoundError
from budget_tracker.logging import get_logger
from budget_tracker.models import Category, CategoryType
from budget_tracker.repositories import category as repo

logger = get_logger(__name__)

# Every new account starts with these
DEFAULT_CATEGORIES: list[tuple[str, CategoryType]] = [
    ("Makan", CategoryType.WEEKLY),
    ("Transportasi", CategoryType.WEEKLY),
    ("Kost/Sewa", CategoryType.MONTHLY),
    ("Keluarga", CategoryType.MONTHLY),
    ("Tabungan", CategoryType.MONTHLY),
    ("Hiburan", CategoryType.OTHER),
    ("Gaji", CategoryType.MONTHLY),
]


async def create_default_categories(db: AsyncSession, user_id: uuid.UUID) -> list[Category]:
    categories = [Category(name=name, type=kind, user_id=user_id) for name, kind in DEFAULT_CATEGORIES]
    return await repo.add_categories(db, categories)


async def list_categories(
    db: AsyncSession, user_id: uuid.UUID, category_type: CategoryType | None = None
) -> list[Category]:
    return await repo.list_categories(db, user_id, category_type)


async def create_category(db: AsyncSession, user_id: uuid.UUID, name: str, kind: CategoryType) -> Category:
    [category] = await repo.add_categories(db, [Category(name=name, type=kind, user_id=user_id)])
    await db.refresh(category)
    logger.info("category_created", category_id=str(category.id))
    return category


async def require_visible_category(db: AsyncSession, user_id: uuid.UUID, category_id: uuid.UUID) -> Category:
    """Return the category if the user may use it, else raise NotFoundError."""
    category = await repo.get_visible_category(db, user_id, category_id)
    if category is None:
        raise NotFoundError("Category")
    return category


async def delete_category(db: AsyncSession, user_id: uuid.UUID, category_id: uuid.UUID) -> None:
    """Delete one of the user's own categories.

    Global categories and other users' categories cannot be deleted.
    Transactions and budgets in the category are removed by the cascade.
    """
    category = await repo.get_category(db, category_id)
    if category is None:
        raise NotFoundError("Category")
    if category.user_id != user_id:
        raise AuthorizationError("You can only delete your own categories")
    await repo.delete_category(db, category)
    logger.info("category_deleted", category_id=str(category_id))
