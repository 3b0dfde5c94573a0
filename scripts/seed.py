"""
Load a demo account with a month of sample data, or wipe every table.

    python -m scripts.seed            # demo@example.com / demo123
    python -m scripts.seed --reset    # delete all rows first

Seeding is idempotent: an existing demo user, its categories, transactions
and budgets are reused rather than duplicated.
"""

import argparse
import asyncio
import datetime as dt

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from budget_tracker.config import settings
from budget_tracker.db.session import Database
from budget_tracker.logging import get_logger
from budget_tracker.models import Budget, BudgetPeriod, Category, Transaction, User
from budget_tracker.repositories import user as user_repo
from budget_tracker.security import hash_password
from budget_tracker.services.category import create_default_categories

logger = get_logger(__name__)

DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "demo123"

# (category, amount, day of month, note)
SAMPLE_TRANSACTIONS = [
    ("Gaji", 12_000_000, 1, "Gaji bulanan"),
    ("Kost/Sewa", -1_500_000, 1, "Sewa kost"),
    ("Keluarga", -700_000, 1, "Kiriman untuk keluarga"),
    ("Tabungan", -1_000_000, 1, "Tabungan rutin bulanan"),
    ("Makan", -120_000, 2, "Belanja groceries minggu 1"),
    ("Transportasi", -50_000, 3, "Ongkos transportasi minggu 1"),
    ("Makan", -85_000, 5, "Makan di luar"),
    ("Makan", -110_000, 9, "Belanja groceries minggu 2"),
    ("Transportasi", -45_000, 10, "Ongkos transportasi minggu 2"),
    ("Hiburan", -150_000, 13, "Nonton bioskop"),
    ("Makan", -75_000, 16, "Belanja groceries minggu 3"),
    ("Hiburan", -95_000, 20, "Langganan streaming"),
]

# Every sample budget is monthly
SAMPLE_BUDGETS = [
    ("Makan", 600_000),
    ("Transportasi", 200_000),
    ("Kost/Sewa", 1_500_000),
    ("Keluarga", 700_000),
    ("Tabungan", 1_000_000),
    ("Hiburan", 300_000),
]

# Children before parents
TABLES_IN_DELETE_ORDER = (Budget, Transaction, Category, User)


async def clear_all(db: AsyncSession) -> None:
    """Delete every row in every table."""
    for model in TABLES_IN_DELETE_ORDER:
        result = await db.execute(delete(model))
        logger.info("table_cleared", table=model.__tablename__, rows=result.rowcount)


async def seed_demo(db: AsyncSession, today: dt.date) -> User:
    """Create (or reuse) the demo user and fill the month containing ``today``."""
    user = await user_repo.get_user_by_email(db, DEMO_EMAIL)
    if user is None:
        user = await user_repo.add_user(
            db, User(name="Demo User", email=DEMO_EMAIL, password_hash=hash_password(DEMO_PASSWORD))
        )
        logger.info("demo_user_created", user_id=str(user.id))

    result = await db.execute(select(Category).where(Category.user_id == user.id))
    categories = {c.name: c for c in result.scalars()}
    if not categories:
        categories = {c.name: c for c in await create_default_categories(db, user.id)}
        logger.info("demo_categories_created", count=len(categories))

    count = await db.execute(select(func.count(Transaction.id)).where(Transaction.user_id == user.id))
    if count.scalar_one() == 0:
        db.add_all(
            Transaction(
                user_id=user.id,
                category_id=categories[name].id,
                amount=amount,
                date=today.replace(day=day),
                note=note,
            )
            for name, amount, day, note in SAMPLE_TRANSACTIONS
        )
        logger.info("demo_transactions_created", count=len(SAMPLE_TRANSACTIONS))

    count = await db.execute(select(func.count(Budget.id)).where(Budget.user_id == user.id))
    if count.scalar_one() == 0:
        db.add_all(
            Budget(user_id=user.id, category_id=categories[name].id, amount=amount, period=BudgetPeriod.MONTH)
            for name, amount in SAMPLE_BUDGETS
        )
        logger.info("demo_budgets_created", count=len(SAMPLE_BUDGETS))

    await db.flush()
    return user


async def main(reset: bool) -> None:
    database = Database.from_settings(settings)
    try:
        async with database.session_factory() as db:
            if reset:
                await clear_all(db)
            await seed_demo(db, dt.date.today())
            await db.commit()
    finally:
        await database.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--reset", action="store_true", help="delete all rows before seeding")
    asyncio.run(main(parser.parse_args().reset))
