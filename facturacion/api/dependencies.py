"""
Dependency injection container for FastAPI.

Provides services, stores and settings to route handlers. Tests swap
these out through ``app.dependency_overrides``.
"""

from functools import lru_cache

from facturacion.application.services import get_invoice_service, get_reporting_service
from facturacion.config import Settings, get_settings
from facturacion.core.services import InvoiceReportingService, InvoiceService
from facturacion.infrastructure.storage.sqlite import (
    SQLiteClientStore,
    get_client_store,
)


@lru_cache
def get_app_settings() -> Settings:
    """Get cached application settings."""
    return get_settings()


# Service dependencies
async def get_invoices() -> InvoiceService:
    """Get invoice lifecycle service."""
    return await get_invoice_service()


async def get_reporting() -> InvoiceReportingService:
    """Get invoice reporting service."""
    return await get_reporting_service()


# Store dependencies
async def get_cli_store() -> SQLiteClientStore:
    """Get client store."""
    return await get_client_store()
