"""Dashboard endpoints."""

import datetime as dt

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from budget_tracker.dependencies import DB, CurrentUser
from budget_tracker.params import parse_filters
from budget_tracker.responses import ApiResponseBuilder, success_response
from budget_tracker.schemas.dashboard import BudgetUsage
from budget_tracker.services import dashboard as service

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary")
async def summary(request: Request, db: DB, user: CurrentUser) -> JSONResponse:
    """Income, expenses, balance and savings rate for ``month`` (YYYY-MM, default current)."""
    filters = parse_filters(request.query_params, ["month"])
    month = service.parse_month(filters.get("month"), dt.date.today())
    result = await service.get_monthly_summary(db, user.id, month)
    return success_response(result)


@router.get("/budgets")
async def budget_usage(db: DB, user: CurrentUser) -> JSONResponse:
    """Spending against each budget in its current week or month."""
    usage = await service.get_budget_usage(db, user.id, dt.date.today())
    over = sum(1 for item in usage if item.over_budget)
    return (
        ApiResponseBuilder[list[BudgetUsage]]()
        .set_data(usage)
        .set_message(f"{over} of {len(usage)} budgets exceeded" if over else "All budgets on track")
        .set_header("Cache-Control", "no-store")
        .build()
    )
