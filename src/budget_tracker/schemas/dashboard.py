"""Dashboard read models.

Computed by services/dashboard.py; never persisted.
"""

import datetime as dt
import uuid

from budget_tracker.models import BudgetPeriod
from budget_tracker.schemas.base import CamelModel


class MonthlySummary(CamelModel):
    """Income, expenses and balance for one calendar month."""

    month: str  # YYYY-MM
    total_income: int
    total_expenses: int
    balance: int
    savings_rate: float
    transaction_count: int


class BudgetUsage(CamelModel):
    """Spending against one budget within its current period."""

    budget_id: uuid.UUID
    category_id: uuid.UUID
    category_name: str
    period: BudgetPeriod
    period_start: dt.date
    period_end: dt.date
    amount: int
    spent: int
    remaining: int
    percentage: float
    over_budget: bool
