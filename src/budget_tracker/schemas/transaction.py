"""Transaction schemas.

``amount`` is signed: positive for income, negative for expense. Zero is
rejected because it carries no direction.
"""

import datetime as dt
import uuid
from typing import Annotated

from pydantic import AfterValidator, Field

from budget_tracker.models import MAX_TRANSACTION_AMOUNT
from budget_tracker.schemas.base import CamelModel


def _non_zero(value: int) -> int:
    if value == 0:
        raise ValueError("Amount must not be zero")
    return value


Amount = Annotated[
    int,
    Field(ge=-MAX_TRANSACTION_AMOUNT, le=MAX_TRANSACTION_AMOUNT),
    AfterValidator(_non_zero),
]
Note = Annotated[str, Field(max_length=500)]


class TransactionCreate(CamelModel):
    amount: Amount
    category_id: uuid.UUID
    date: dt.date
    note: Note | None = None


class TransactionUpdate(CamelModel):
    """Partial update: only the fields present in the body are applied."""

    amount: Amount | None = None
    category_id: uuid.UUID | None = None
    date: dt.date | None = None
    note: Note | None = None


class TransactionResponse(CamelModel):
    id: uuid.UUID
    amount: int
    category_id: uuid.UUID
    date: dt.date
    note: str | None
    created_at: dt.datetime
