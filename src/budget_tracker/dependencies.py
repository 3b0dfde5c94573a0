"""Shared FastAPI dependencies.

Reusable type aliases and dependency functions that routers import.
Defined here (not in main.py) to avoid circular imports when routers
are registered in main.
"""

from typing import Annotated

import structlog
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from budget_tracker.db.session import Database, get_database, get_db
from budget_tracker.exceptions import AuthenticationError
from budget_tracker.models import User
from budget_tracker.security import decode_access_token
from budget_tracker.services.auth import get_active_user

DB = Annotated[AsyncSession, Depends(get_db)]
DatabaseHandle = Annotated[Database, Depends(get_database)]

# auto_error=False so a missing header goes through our AuthenticationError
# and gets the standard envelope instead of FastAPI's default 403
_bearer = HTTPBearer(auto_error=False)


async def get_current_user(
    db: DB,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_bearer)],
) -> User:
    """Resolve the bearer token to a user and bind its id to the log context."""
    if credentials is None:
        raise AuthenticationError("Missing bearer token")
    user = await get_active_user(db, decode_access_token(credentials.credentials))
    structlog.contextvars.bind_contextvars(user_id=str(user.id))
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
