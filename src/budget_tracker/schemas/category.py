"""Category schemas."""

import uuid
from datetime import datetime

from pydantic import Field

from budget_tracker.models import CategoryType
from budget_tracker.schemas.base import CamelModel


class CategoryCreate(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    type: CategoryType


class CategoryResponse(CamelModel):
    """A category; ``user_id`` is null for global categories."""

    id: uuid.UUID
    name: str
    type: CategoryType
    user_id: uuid.UUID | None
    created_at: datetime
