"""FastAPI main application."""
import asyncio
import contextlib
import logging
import os
import signal
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import List

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from transactions_service.config import settings
from transactions_service.errors import (
    AccountNotFoundError,
    AggregationError,
    InvalidIdentifierError,
    StorageUnavailableError,
)
from transactions_service.logging_config import configure_logging
from transactions_service.models.month_group import ErrorResponse, MonthGroup, StatusResponse
from transactions_service.services.query import TransactionQueryService
from transactions_service.storage.database import Database, get_database

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)
access_logger = logging.getLogger("transactions_service.access")


async def connect_database(database: Database) -> None:
    """Connect in the background; requests see "DB not ready" until this finishes."""
    try:
        await asyncio.to_thread(database.connect)
    except StorageUnavailableError:
        logger.exception("Database connection failed")
        if settings.exit_on_connect_failure:
            os.kill(os.getpid(), signal.SIGTERM)
        return
    logger.info("Successfully connected to database")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting transactions service...")
    logger.info("Database URL: %s", settings.database_url)
    database = get_database()
    task = asyncio.create_task(connect_database(database))
    try:
        yield
    finally:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        database.close()


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)


def get_query_service(database: Database = Depends(get_database)) -> TransactionQueryService:
    return TransactionQueryService(database)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    url = request.url.path
    if request.url.query:
        url += f"?{request.url.query}"
    access_logger.info("%s - %s %s", datetime.now(timezone.utc).isoformat(), request.method, url)
    return await call_next(request)


# ---------------------------------------------------------------------------
# Error translation
# ---------------------------------------------------------------------------

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@app.exception_handler(StorageUnavailableError)
async def storage_unavailable_handler(request: Request, exc: StorageUnavailableError):
    return _error(503, "DB not ready")


@app.exception_handler(InvalidIdentifierError)
async def invalid_identifier_handler(request: Request, exc: InvalidIdentifierError):
    return _error(400, "Invalid user id")


@app.exception_handler(AccountNotFoundError)
async def account_not_found_handler(request: Request, exc: AccountNotFoundError):
    return _error(404, "User not found")


@app.exception_handler(AggregationError)
async def aggregation_error_handler(request: Request, exc: AggregationError):
    # Logged with context by TransactionQueryService
    if "user_id" in request.path_params:
        return _error(500, "Failed to load user transactions")
    return _error(500, "Failed to load transactions")


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

@app.get("/status", response_model=StatusResponse)
async def status():
    """Health check; answers regardless of database readiness."""
    return StatusResponse(ok=True)


@app.get(
    "/",
    response_model=List[MonthGroup],
    responses={500: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
def list_monthly_transactions(service: TransactionQueryService = Depends(get_query_service)):
    """Transactions of every account grouped by month, most recent first."""
    return service.aggregate_all()


@app.get(
    "/{user_id}",
    response_model=List[MonthGroup],
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        503: {"model": ErrorResponse},
    },
)
def list_user_monthly_transactions(
    user_id: str,
    service: TransactionQueryService = Depends(get_query_service),
):
    """Transactions of one user grouped by month, most recent first."""
    return service.aggregate_for_account(user_id)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
