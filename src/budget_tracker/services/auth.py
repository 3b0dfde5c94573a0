"""Account registration and sign-in."""

import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from budget_tracker.exceptions import AuthenticationError, ConflictError
from budget_tracker.logging import get_logger
from budget_tracker.models import User
from budget_tracker.repositories import user as repo
from budget_tracker.security import create_access_token, hash_password, verify_password
from budget_tracker.services.category import create_default_categories

logger = get_logger(__name__)


async def register_user(db: AsyncSession, name: str, email: str, password: str) -> User:
    """Create an account and its default categories.

    Raises:
        ConflictError: the email is already registered.
    """
    if await repo.get_user_by_email(db, email) is not None:
        raise ConflictError("User with this email already exists")

    user = User(name=name, email=email.lower(), password_hash=hash_password(password))
    try:
        await repo.add_user(db, user)
    except IntegrityError as exc:
        # Another registration took the email after the check above
        raise ConflictError("User with this email already exists") from exc
    await create_default_categories(db, user.id)
    await db.refresh(user)

    logger.info("user_registered", user_id=str(user.id))
    return user


async def authenticate(db: AsyncSession, email: str, password: str) -> tuple[str, int]:
    """Check credentials and issue an access token.

    The same error is raised for an unknown email and a wrong password.
    """
    user = await repo.get_user_by_email(db, email)
    if user is None or user.password_hash is None or not verify_password(password, user.password_hash):
        logger.info("login_failed")
        raise AuthenticationError("Invalid email or password")

    logger.info("login_succeeded", user_id=str(user.id))
    return create_access_token(user.id)


async def get_active_user(db: AsyncSession, user_id: uuid.UUID) -> User:
    """Load the user a token was issued for; a deleted account fails authentication."""
    user = await repo.get_user(db, user_id)
    if user is None:
        raise AuthenticationError("User no longer exists")
    return user
