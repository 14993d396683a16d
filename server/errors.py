import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for errors surfaced by the student store."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class StudentNotFound(StoreError):
    """No record matches the given email."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Student not found"):
        super().__init__(message)


class StoreFailure(StoreError):
    """Any other store-level error: constraint violations, casts, connection errors."""


async def store_error_handler(request: Request, exc: StoreError):
    if isinstance(exc, StoreFailure):
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Unknown routes and methods answer in the same {"error"} shape as the store errors.
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    # A body that is not a JSON object never reaches the store; report it the same way.
    message = "; ".join(error["msg"] for error in exc.errors()) or "Invalid request body"
    logger.error(f"{request.method} {request.url.path} rejected: {message}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": message},
    )


async def general_exception_handler(request: Request, exc: Exception):
    logger.critical(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc)},
    )
