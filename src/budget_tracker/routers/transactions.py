"""Transaction endpoints."""

import uuid

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from budget_tracker.dependencies import DB, CurrentUser
from budget_tracker.params import parse_filters, parse_pagination, parse_sort
from budget_tracker.responses import (
    created_response,
    paginated_response,
    success_response,
    validate_request_body,
)
from budget_tracker.schemas.transaction import TransactionCreate, TransactionResponse, TransactionUpdate
from budget_tracker.services import transaction as service

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("")
async def list_transactions(request: Request, db: DB, user: CurrentUser) -> JSONResponse:
    """List the caller's transactions.

    Query: page, limit, sortBy (createdAt|date|amount), sortOrder (asc|desc),
    categoryId, type (income|expense), startDate, endDate.
    """
    query = request.query_params
    pagination = parse_pagination(query)
    sort = parse_sort(query, service.SORT_FIELDS)
    filters = parse_filters(query, service.FILTER_FIELDS)

    page = await service.list_transactions(db, user.id, pagination, sort, filters)
    return paginated_response(
        [TransactionResponse.model_validate(t) for t in page.items],
        page.page,
        page.limit,
        page.total,
    )


@router.post("", status_code=201)
async def create_transaction(request: Request, db: DB, user: CurrentUser) -> JSONResponse:
    body = await validate_request_body(request, TransactionCreate)
    transaction = await service.create_transaction(
        db,
        user.id,
        amount=body.amount,
        category_id=body.category_id,
        date=body.date,
        note=body.note,
    )
    return created_response(TransactionResponse.model_validate(transaction), "Transaction created successfully")


@router.get("/{transaction_id}")
async def get_transaction(transaction_id: uuid.UUID, db: DB, user: CurrentUser) -> JSONResponse:
    transaction = await service.get_transaction(db, user.id, transaction_id)
    return success_response(TransactionResponse.model_validate(transaction))


@router.put("/{transaction_id}")
async def update_transaction(
    transaction_id: uuid.UUID, request: Request, db: DB, user: CurrentUser
) -> JSONResponse:
    body = await validate_request_body(request, TransactionUpdate)
    transaction = await service.update_transaction(
        db, user.id, transaction_id, body.model_dump(exclude_unset=True)
    )
    return success_response(TransactionResponse.model_validate(transaction), "Transaction updated successfully")


@router.delete("/{transaction_id}")
async def delete_transaction(transaction_id: uuid.UUID, db: DB, user: CurrentUser) -> JSONResponse:
    await service.delete_transaction(db, user.id, transaction_id)
    return success_response(None, "Transaction deleted successfully")
