"""Health check endpoint."""

from datetime import UTC, datetime

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from budget_tracker.config import settings
from budget_tracker.dependencies import DatabaseHandle
from budget_tracker.exceptions import DatabaseError
from budget_tracker.logging import get_logger
from budget_tracker.responses import error_response, success_response

router = APIRouter(tags=["health"])

logger = get_logger(__name__)


@router.get("/health")
async def health(database: DatabaseHandle) -> JSONResponse:
    """Verify database connectivity.

    Returns 200 only if the database answers a ping, 503 otherwise.
    Used by load balancers and container orchestrators to detect unhealthy instances.
    """
    try:
        await database.ping()
    except Exception as exc:
        logger.warning("health_check_failed", error=str(exc))
        return error_response(DatabaseError("Database connection failed"), 503)

    return success_response(
        {
            "status": "healthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "environment": settings.environment,
            "version": settings.app_version,
            "services": {"database": {"status": "connected"}},
        },
        "System is healthy",
    )
