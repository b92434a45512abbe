"""
Exception handlers rendering application errors in the response envelope.

Every error leaves the service as ``{"success": false, "message", "error_code"}``
with the HTTP status of its kind. Internal details and tracebacks are logged,
never returned.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.core.exceptions import BaseAppException, ErrorCode
from app.core.logging import get_logger

logger = get_logger(__name__)


def _envelope(message: str, error_code: ErrorCode, errors=None) -> dict:
    body = {"success": False, "message": message, "error_code": error_code.value}
    if errors:
        body["errors"] = errors
    return body


async def handle_application_exception(request: Request, exc: BaseAppException) -> JSONResponse:
    """Handle custom application exceptions"""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"Application exception: {exc.error_code.value} - {exc.message}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_code": exc.error_code.value,
            "details": exc.details,
        }
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request body/query validation errors"""
    errors = []
    for error in exc.errors():
        errors.append({
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg"),
            "code": error.get("type"),
        })

    logger.info(
        f"Validation error: {len(errors)} field(s) failed validation",
        extra={"path": request.url.path, "method": request.method}
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_envelope("Request validation failed", ErrorCode.VALIDATION_ERROR, errors),
    )


async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle storage failures that escaped the service layer"""
    logger.error(
        f"Database exception: {type(exc).__name__}",
        extra={"path": request.url.path, "method": request.method},
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope("Database operation failed", ErrorCode.INTERNAL_ERROR),
    )


async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled exception: {type(exc).__name__}",
        extra={"path": request.url.path, "method": request.method},
        exc_info=True,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope("Something went wrong", ErrorCode.INTERNAL_ERROR),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BaseAppException, handle_application_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(SQLAlchemyError, handle_database_error)
    app.add_exception_handler(Exception, handle_unexpected_exception)


__all__ = ["register_exception_handlers"]
