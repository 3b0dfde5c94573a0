"""Transaction data-access layer.

Pure query functions: no business logic, no HTTP concerns.
Each function takes a session and returns models or scalars.
"""

import datetime as dt
import uuid
from dataclasses import dataclass
from typing import Any, Literal

from sqlalchemy import ColumnElement, Select, case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from budget_tracker.models import Transaction

SORT_COLUMNS: dict[str, Any] = {
    "createdAt": Transaction.created_at,
    "date": Transaction.date,
    "amount": Transaction.amount,
}


@dataclass(frozen=True)
class TransactionCriteria:
    """Optional narrowing of a user's transactions. ``None`` means no constraint."""

    category_id: uuid.UUID | None = None
    direction: Literal["income", "expense"] | None = None
    start_date: dt.date | None = None
    end_date: dt.date | None = None


def _where(user_id: uuid.UUID, criteria: TransactionCriteria) -> list[ColumnElement[bool]]:
    clauses = [Transaction.user_id == user_id]
    if criteria.category_id is not None:
        clauses.append(Transaction.category_id == criteria.category_id)
    if criteria.direction == "income":
        clauses.append(Transaction.amount > 0)
    elif criteria.direction == "expense":
        clauses.append(Transaction.amount < 0)
    if criteria.start_date is not None:
        clauses.append(Transaction.date >= criteria.start_date)
    if criteria.end_date is not None:
        clauses.append(Transaction.date <= criteria.end_date)
    return clauses


def _ordered(stmt: Select[tuple[Transaction]], sort_by: str, sort_order: str) -> Select[tuple[Transaction]]:
    column = SORT_COLUMNS[sort_by]
    primary = column.desc() if sort_order == "desc" else column.asc()
    # id breaks ties so pages don't overlap
    return stmt.order_by(primary, Transaction.id)


async def list_transactions(
    db: AsyncSession,
    user_id: uuid.UUID,
    criteria: TransactionCriteria,
    *,
    offset: int,
    limit: int,
    sort_by: str = "createdAt",
    sort_order: str = "asc",
) -> list[Transaction]:
    """Return one page of a user's transactions."""
    stmt = select(Transaction).where(*_where(user_id, criteria))
    stmt = _ordered(stmt, sort_by, sort_order).offset(offset).limit(limit)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def count_transactions(db: AsyncSession, user_id: uuid.UUID, criteria: TransactionCriteria) -> int:
    stmt = select(func.count(Transaction.id)).where(*_where(user_id, criteria))
    result = await db.execute(stmt)
    return result.scalar_one()


async def get_transaction(
    db: AsyncSession, user_id: uuid.UUID, transaction_id: uuid.UUID
) -> Transaction | None:
    """Return the transaction only if it belongs to ``user_id``."""
    stmt = select(Transaction).where(Transaction.id == transaction_id, Transaction.user_id == user_id)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def add_transaction(db: AsyncSession, transaction: Transaction) -> Transaction:
    db.add(transaction)
    await db.flush()
    await db.refresh(transaction)
    return transaction


async def delete_transaction(db: AsyncSession, transaction: Transaction) -> None:
    await db.delete(transaction)
    await db.flush()


async def sum_income_and_expenses(
    db: AsyncSession, user_id: uuid.UUID, start: dt.date, end: dt.date
) -> tuple[int, int, int]:
    """Return (income, expenses, count) for ``start <= date <= end``.

    Expenses are returned as a positive number.
    """
    income = func.coalesce(func.sum(case((Transaction.amount > 0, Transaction.amount), else_=0)), 0)
    expenses = func.coalesce(func.sum(case((Transaction.amount < 0, -Transaction.amount), else_=0)), 0)
    stmt = select(income, expenses, func.count(Transaction.id)).where(
        Transaction.user_id == user_id,
        Transaction.date >= start,
        Transaction.date <= end,
    )
    row = (await db.execute(stmt)).one()
    return int(row[0]), int(row[1]), int(row[2])


async def sum_spent(
    db: AsyncSession, user_id: uuid.UUID, category_id: uuid.UUID, start: dt.date, end: dt.date
) -> int:
    """Return total expense (as a positive number) in a category for a date range."""
    stmt = select(func.coalesce(func.sum(-Transaction.amount), 0)).where(
        Transaction.user_id == user_id,
        Transaction.category_id == category_id,
        Transaction.amount < 0,
        Transaction.date >= start,
        Transaction.date <= end,
    )
    result = await db.execute(stmt)
    return int(result.scalar_one())
