"""API middleware."""

from facturacion.api.middleware.error_handler import (
    ErrorHandlerMiddleware,
    setup_exception_handlers,
)
from facturacion.api.middleware.logging import LoggingMiddleware

__all__ = ["LoggingMiddleware", "ErrorHandlerMiddleware", "setup_exception_handlers"]
