"""Budget schemas."""

import uuid
from datetime import datetime

from pydantic import Field

from budget_tracker.models import BudgetPeriod
from budget_tracker.schemas.base import CamelModel


class BudgetCreate(CamelModel):
    category_id: uuid.UUID
    amount: int = Field(ge=0)
    period: BudgetPeriod


class BudgetUpdate(CamelModel):
    amount: int | None = Field(default=None, ge=0)
    period: BudgetPeriod | None = None


class BudgetResponse(CamelModel):
    id: uuid.UUID
    category_id: uuid.UUID
    category_name: str
    amount: int
    period: BudgetPeriod
    created_at: datetime
