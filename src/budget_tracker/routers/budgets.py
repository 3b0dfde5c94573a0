"""Budget endpoints."""

import uuid

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.responses import Response

from budget_tracker.dependencies import DB, CurrentUser
from budget_tracker.models import Budget
from budget_tracker.responses import (
    created_response,
    no_content_response,
    success_response,
    validate_request_body,
)
from budget_tracker.schemas.budget import BudgetCreate, BudgetResponse, BudgetUpdate
from budget_tracker.services import budget as service

router = APIRouter(prefix="/budgets", tags=["budgets"])


def _to_response(budget: Budget) -> BudgetResponse:
    return BudgetResponse(
        id=budget.id,
        category_id=budget.category_id,
        category_name=budget.category.name,
        amount=budget.amount,
        period=budget.period,
        created_at=budget.created_at,
    )


@router.get("")
async def list_budgets(db: DB, user: CurrentUser) -> JSONResponse:
    budgets = await service.list_budgets(db, user.id)
    return success_response([_to_response(b) for b in budgets])


@router.post("", status_code=201)
async def create_budget(request: Request, db: DB, user: CurrentUser) -> JSONResponse:
    body = await validate_request_body(request, BudgetCreate)
    budget = await service.create_budget(
        db, user.id, category_id=body.category_id, amount=body.amount, period=body.period
    )
    return created_response(_to_response(budget), "Budget created successfully")


@router.put("/{budget_id}")
async def update_budget(budget_id: uuid.UUID, request: Request, db: DB, user: CurrentUser) -> JSONResponse:
    body = await validate_request_body(request, BudgetUpdate)
    budget = await service.update_budget(db, user.id, budget_id, amount=body.amount, period=body.period)
    return success_response(_to_response(budget), "Budget updated successfully")


@router.delete("/{budget_id}", status_code=204)
async def delete_budget(budget_id: uuid.UUID, db: DB, user: CurrentUser) -> Response:
    await service.delete_budget(db, user.id, budget_id)
    return no_content_response()
