"""
Error handling middleware.

Standardizes all API error responses to include:
- error_code: machine-readable identifier
- message: human-readable description
- hint: suggested recovery action

Server-side failures answer with a generic message; their details are
only logged.
"""

import traceback
from collections.abc import Awaitable, Callable

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from facturacion.application.dto.responses import ErrorResponse
from facturacion.config import get_logger
from facturacion.core.exceptions import (
    AttachmentError,
    AuthenticationError,
    ClientNotFoundError,
    ConflictError,
    FacturacionError,
    InvalidTokenError,
    InvoiceNotFoundError,
    StorageError,
    ValidationError,
)

logger = get_logger(__name__)

GENERIC_SERVER_ERROR = "Internal server error"

# Map exceptions to HTTP status codes; first match wins
EXCEPTION_STATUS_MAP: dict[type[Exception], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_400_BAD_REQUEST,
    InvalidTokenError: status.HTTP_400_BAD_REQUEST,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    InvoiceNotFoundError: status.HTTP_404_NOT_FOUND,
    ClientNotFoundError: status.HTTP_404_NOT_FOUND,
    AttachmentError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    StorageError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

# Hint messages per error code
HINT_MAP: dict[str, str] = {
    "INVOICE_NOT_FOUND": "Check the invoice ID and try GET /api/invoices to list your invoices.",
    "CLIENT_NOT_FOUND": "Check the client ID and try GET /api/clients to list your clients.",
    "DUPLICATE_INVOICE_NUMBER": "Invoice numbers must be unique. Choose another number.",
    "DUPLICATE_CLIENT_EMAIL": "Client emails must be unique. Use another address.",
    "AUTHENTICATION_REQUIRED": "Send an 'Authorization: Bearer <token>' header.",
    "INVALID_TOKEN": "The token is malformed, expired or signed with another key. Log in again.",
    "VALIDATION_ERROR": "Check the request fields and their formats.",
    "ATTACHMENT_NOT_FOUND": "The attachment file is missing on the server. Check server logs.",
    "ATTACHMENT_STORAGE_ERROR": "The attachment could not be written or removed. Check server logs.",
    "DATABASE_ERROR": "A database operation failed. Check server logs.",
}

# Default hints by HTTP status code
STATUS_HINTS: dict[int, str] = {
    400: "Check the request parameters and body.",
    401: "Authentication is required.",
    404: "The requested resource was not found. Verify the ID.",
    422: "The request could not be processed. Check the input format.",
    500: "An internal error occurred. Check server logs.",
}


def _get_hint(error_code: str, status_code: int) -> str:
    """Resolve hint from error code, falling back to status-based hint."""
    return HINT_MAP.get(error_code) or STATUS_HINTS.get(status_code, "")


def status_for(exc: Exception) -> int:
    """HTTP status for an exception."""
    for exc_type, code in EXCEPTION_STATUS_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def build_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Convert an exception to a standardized JSON response, logging it."""
    status_code = status_for(exc)
    error_code = exc.code if isinstance(exc, FacturacionError) else "INTERNAL_ERROR"
    request_id = getattr(request.state, "request_id", None)

    if status_code >= 500:
        logger.error(
            "request_failed",
            request_id=request_id,
            path=request.url.path,
            error_type=exc.__class__.__name__,
            error=str(exc),
            traceback=traceback.format_exc(),
        )
        message = GENERIC_SERVER_ERROR
    else:
        logger.info(
            "request_rejected",
            request_id=request_id,
            path=request.url.path,
            error_code=error_code,
            status_code=status_code,
        )
        message = exc.message if isinstance(exc, FacturacionError) else str(exc)

    error_response = ErrorResponse(
        error_code=error_code,
        message=message,
        hint=_get_hint(error_code, status_code),
        path=request.url.path,
    )

    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(mode="json"),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Catches anything the exception handlers did not and converts it to
    a standardized JSON error response.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Handle request with error catching."""
        try:
            return await call_next(request)

        except Exception as e:
            return build_error_response(request, e)


def setup_exception_handlers(app: FastAPI) -> None:
    """Set up FastAPI exception handlers."""
    from fastapi.exceptions import RequestValidationError
    from starlette.exceptions import HTTPException

    @app.exception_handler(FacturacionError)
    async def domain_exception_handler(
        request: Request,
        exc: FacturacionError,
    ) -> JSONResponse:
        """Handle domain errors raised by services, stores and auth."""
        return build_error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Handle Pydantic validation errors."""
        errors = []
        for error in exc.errors():
            loc = " -> ".join(str(part) for part in error["loc"])
            errors.append(f"{loc}: {error['msg']}")

        return JSONResponse(
            status_code=422,
            content=ErrorResponse(
                error_code="VALIDATION_ERROR",
                message="Request validation failed",
                hint="Check the request body fields and types.",
                detail="; ".join(errors),
                path=request.url.path,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request,
        exc: HTTPException,
    ) -> JSONResponse:
        """Handle HTTP exceptions with standardized format."""
        error_code = _infer_error_code(exc.status_code)
        hint = _get_hint(error_code, exc.status_code)

        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error_code=error_code,
                message=str(exc.detail) if exc.detail else "An error occurred",
                hint=hint,
                path=request.url.path,
            ).model_dump(mode="json"),
            headers=getattr(exc, "headers", None),
        )


def _infer_error_code(status_code: int) -> str:
    """Infer a machine-readable error code from an HTTP status."""
    if status_code == 404:
        return "NOT_FOUND"
    if status_code == 405:
        return "METHOD_NOT_ALLOWED"
    if status_code == 400:
        return "BAD_REQUEST"
    if status_code == 422:
        return "UNPROCESSABLE_ENTITY"
    return "HTTP_ERROR"
