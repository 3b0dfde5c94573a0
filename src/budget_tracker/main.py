from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from budget_tracker.config import settings
from budget_tracker.db.session import Database
from budget_tracker.exceptions import AppError, DatabaseError
from budget_tracker.logging import get_logger
from budget_tracker.middleware import RequestContextMiddleware
from budget_tracker.responses import error_response
from budget_tracker.routers import auth, budgets, categories, dashboard, health, transactions

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Own the database handle for the lifetime of the process.

    Startup: create the engine and its pool.
    Shutdown: close pooled connections gracefully.
    """
    app.state.database = Database.from_settings(settings)
    logger.info("startup", environment=settings.environment)
    yield
    await app.state.database.dispose()
    logger.info("shutdown")


app = FastAPI(title="Budget Tracker API", version=settings.app_version, lifespan=lifespan)
app.add_middleware(RequestContextMiddleware)

for module in (health, auth, categories, transactions, budgets, dashboard):
    app.include_router(module.router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Return the error's own status and message."""
    if exc.status_code < 500:
        logger.info("app_error", error_kind=exc.kind, error=exc.message, status_code=exc.status_code)
    return error_response(exc)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 listing every invalid path or query parameter."""
    return error_response(exc)


@app.exception_handler(SchemaValidationError)
async def schema_validation_handler(request: Request, exc: SchemaValidationError) -> JSONResponse:
    """Return 400 listing every invalid body field."""
    return error_response(exc)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap framework errors (unknown route, wrong method) in the standard envelope.

    Headers such as ``Allow`` on a 405 are passed through.
    """
    response = error_response(AppError(str(exc.detail), exc.status_code))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Log the driver error and return a non-operational 500."""
    logger.exception("database_error", error_type=type(exc).__name__)
    return error_response(DatabaseError())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Return a 500; the message is hidden from clients in production."""
    return error_response(exc)
