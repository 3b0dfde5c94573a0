"""Registration and sign-in endpoints."""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from budget_tracker.dependencies import DB, CurrentUser
from budget_tracker.responses import created_response, success_response, validate_request_body
from budget_tracker.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from budget_tracker.services.auth import authenticate, register_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=201)
async def register(request: Request, db: DB) -> JSONResponse:
    """Create an account with the default set of categories."""
    body = await validate_request_body(request, RegisterRequest)
    user = await register_user(db, body.name, body.email, body.password)
    return created_response(UserResponse.model_validate(user), "User created successfully")


@router.post("/login")
async def login(request: Request, db: DB) -> JSONResponse:
    """Exchange email and password for a bearer token."""
    body = await validate_request_body(request, LoginRequest)
    token, expires_in = await authenticate(db, body.email, body.password)
    return success_response(TokenResponse(access_token=token, expires_in=expires_in), "Signed in")


@router.get("/me")
async def me(user: CurrentUser) -> JSONResponse:
    return success_response(UserResponse.model_validate(user))
