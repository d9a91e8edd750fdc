"""
Application layer - DTOs and service factories.

This layer sits between the API handlers and the core services:
1. Defining request/response DTOs for API contracts
2. Providing factory functions for dependency injection
"""

from facturacion.application.services import (
    get_invoice_service,
    get_reporting_service,
    reset_services,
)

__all__ = [
    "get_invoice_service",
    "get_reporting_service",
    "reset_services",
]
