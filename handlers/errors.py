"""
handlers/errors.py
------------------
Translates the error types from utils.errors into HTTP responses.
Error bodies are plain text carrying the underlying detail.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse

from utils.errors import NotFoundError, StorageError, ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)


def _describe(exc: RequestValidationError) -> str:
    """Flatten pydantic's error list into one readable line."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "malformed request body"


async def validation_error_handler(request: Request, exc: ValidationError) -> PlainTextResponse:
    return PlainTextResponse(str(exc), status_code=status.HTTP_400_BAD_REQUEST)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> PlainTextResponse:
    return PlainTextResponse(f"Invalid JSON: {_describe(exc)}", status_code=status.HTTP_400_BAD_REQUEST)


async def not_found_handler(request: Request, exc: NotFoundError) -> PlainTextResponse:
    return PlainTextResponse(str(exc), status_code=status.HTTP_404_NOT_FOUND)


async def storage_error_handler(request: Request, exc: StorageError) -> PlainTextResponse:
    logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return PlainTextResponse(f"Database error: {exc}", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def register_error_handlers(app: FastAPI) -> None:
    """Attach all error translators to the application."""
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
