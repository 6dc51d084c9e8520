"""Uniform {success, data|error} response envelope and exception handlers."""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from letterdesk.app.models.common import ErrorCode, Result

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.ALREADY_PAID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_SIGNATURE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.PAYMENT_REQUIRED: status.HTTP_402_PAYMENT_REQUIRED,
    ErrorCode.DOCUMENT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
}

HTTP_STATUS_CODES: dict[int, ErrorCode] = {
    status.HTTP_402_PAYMENT_REQUIRED: ErrorCode.PAYMENT_REQUIRED,
    status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
}


def status_for(code: ErrorCode) -> int:
    """Map an error code to its HTTP status (500 unless listed)."""
    return ERROR_STATUS.get(code, status.HTTP_500_INTERNAL_SERVER_ERROR)


def api_success(data: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    """Create a success response."""
    return JSONResponse(
        status_code=status_code,
        content={"success": True, "data": jsonable_encoder(data)},
    )


def api_error(
    message: str,
    code: ErrorCode,
    status_code: int | None = None,
    details: Any = None,
) -> JSONResponse:
    """Create an error response."""
    status_code = status_code or status_for(code)
    logger.error(
        f"API error: {message}",
        extra={"structured": {"code": code.value, "status": status_code}},
    )

    body: dict[str, Any] = {"success": False, "error": message, "code": code.value}
    if details is not None:
        body["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=body)


def result_error(result: Result[Any]) -> JSONResponse:
    """Create an error response from a failed Result."""
    code = result.error or ErrorCode.INTERNAL_ERROR
    return api_error(result.message or "Request failed", code)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Convert request validation failures into 400 envelopes with field detail."""
    details = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]
    logger.warning(f"Invalid request to {request.url.path}: {len(details)} field error(s)")
    return api_error("Invalid request data", ErrorCode.VALIDATION_ERROR, details=details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap framework HTTP errors (unknown route, bad method) in the envelope."""
    fallback = ErrorCode.VALIDATION_ERROR if exc.status_code < 500 else ErrorCode.INTERNAL_ERROR
    code = HTTP_STATUS_CODES.get(exc.status_code, fallback)
    return api_error(str(exc.detail), code, status_code=exc.status_code)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected errors with context and hide internals from the client."""
    logger.exception(
        "Unhandled API error",
        extra={"structured": {"path": request.url.path, "method": request.method}},
    )
    return api_error("Internal server error", ErrorCode.INTERNAL_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    """Install envelope-producing exception handlers on the app."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
