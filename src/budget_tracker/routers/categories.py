"""Category endpoints."""

import uuid

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from starlette.responses import Response

from budget_tracker.dependencies import DB, CurrentUser
from budget_tracker.exceptions import ValidationError
from budget_tracker.models import CategoryType
from budget_tracker.params import parse_filters
from budget_tracker.responses import (
    created_response,
    no_content_response,
    success_response,
    validate_request_body,
)
from budget_tracker.schemas.category import CategoryCreate, CategoryResponse
from budget_tracker.services import category as service

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("")
async def list_categories(request: Request, db: DB, user: CurrentUser) -> JSONResponse:
    """List the caller's categories plus global ones, optionally filtered by ``type``."""
    filters = parse_filters(request.query_params, ["type"])
    category_type = None
    if raw_type := filters.get("type"):
        try:
            category_type = CategoryType(raw_type)
        except ValueError as exc:
            raise ValidationError("type must be one of: weekly, monthly, other", field="type") from exc

    categories = await service.list_categories(db, user.id, category_type)
    return success_response([CategoryResponse.model_validate(c) for c in categories])


@router.post("", status_code=201)
async def create_category(request: Request, db: DB, user: CurrentUser) -> JSONResponse:
    body = await validate_request_body(request, CategoryCreate)
    category = await service.create_category(db, user.id, body.name, body.type)
    return created_response(CategoryResponse.model_validate(category), "Category created successfully")


@router.delete("/{category_id}", status_code=204)
async def delete_category(category_id: uuid.UUID, db: DB, user: CurrentUser) -> Response:
    await service.delete_category(db, user.id, category_id)
    return no_content_response()
