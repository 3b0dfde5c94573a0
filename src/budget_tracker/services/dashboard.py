"""Dashboard aggregates: monthly balance and budget utilization.

Periods are calendar based. A week runs Monday to Sunday; a month runs from
the 1st to its last day. Both ends are inclusive.
"""

import calendar
import datetime as dt
import re
import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from budget_tracker.exceptions import ValidationError
from budget_tracker.models import BudgetPeriod
from budget_tracker.repositories import budget as budget_repo
from budget_tracker.repositories import transaction as transaction_repo
from budget_tracker.schemas.dashboard import BudgetUsage, MonthlySummary

_MONTH = re.compile(r"^(\d{4})-(\d{2})$")


def month_range(day: dt.date) -> tuple[dt.date, dt.date]:
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def week_range(day: dt.date) -> tuple[dt.date, dt.date]:
    start = day - dt.timedelta(days=day.weekday())
    return start, start + dt.timedelta(days=6)


def period_range(period: BudgetPeriod, day: dt.date) -> tuple[dt.date, dt.date]:
    match period:
        case BudgetPeriod.WEEK:
            return week_range(day)
        case BudgetPeriod.MONTH:
            return month_range(day)


def parse_month(raw: str | None, today: dt.date) -> dt.date:
    """Return the first day of the month named by ``raw`` (YYYY-MM), default this month."""
    if not raw:
        return today.replace(day=1)
    match = _MONTH.match(raw)
    if match is None or not 1 <= int(match.group(2)) <= 12:
        raise ValidationError("month must be in YYYY-MM format", field="month")
    return dt.date(int(match.group(1)), int(match.group(2)), 1)


def _percent(part: int, whole: int) -> float:
    return round(part / whole * 100, 2) if whole > 0 else 0.0


async def get_monthly_summary(db: AsyncSession, user_id: uuid.UUID, month: dt.date) -> MonthlySummary:
    start, end = month_range(month)
    income, expenses, count = await transaction_repo.sum_income_and_expenses(db, user_id, start, end)
    balance = income - expenses
    return MonthlySummary(
        month=start.strftime("%Y-%m"),
        total_income=income,
        total_expenses=expenses,
        balance=balance,
        savings_rate=_percent(balance, income),
        transaction_count=count,
    )


async def get_budget_usage(db: AsyncSession, user_id: uuid.UUID, today: dt.date) -> list[BudgetUsage]:
    """Spending against every budget in the period that contains ``today``.

    One sum query per budget; users have a handful of budgets.
    """
    usage = []
    for budget in await budget_repo.list_budgets(db, user_id):
        start, end = period_range(budget.period, today)
        spent = await transaction_repo.sum_spent(db, user_id, budget.category_id, start, end)
        percentage = _percent(spent, budget.amount)
        usage.append(
            BudgetUsage(
                budget_id=budget.id,
                category_id=budget.category_id,
                category_name=budget.category.name,
                period=budget.period,
                period_start=start,
                period_end=end,
                amount=budget.amount,
                spent=spent,
                remaining=budget.amount - spent,
                percentage=percentage,
                # Raw amounts, not the rounded percentage
                over_budget=budget.amount > 0 and spent > budget.amount,
            )
        )
    return usage
