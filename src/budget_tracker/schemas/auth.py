"""Registration, login and current-user schemas."""

import uuid
from datetime import datetime
from typing import Literal

from pydantic import EmailStr, Field

from budget_tracker.schemas.base import CamelModel


class RegisterRequest(CamelModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(min_length=1)


class TokenResponse(CamelModel):
    access_token: str
    token_type: Literal["bearer"] = "bearer"
    expires_in: int


class UserResponse(CamelModel):
    id: uuid.UUID
    name: str
    email: str
    created_at: datetime | None = None
