"""
Service factory functions for dependency injection.

This module wires infrastructure implementations to core services.
API dependencies should import from here.
"""

from typing import TYPE_CHECKING

from facturacion.core.services import InvoiceReportingService, InvoiceService

if TYPE_CHECKING:
    from facturacion.core.interfaces import IAttachmentStore, IInvoiceStore


# Singleton service instances
_invoice_service: InvoiceService | None = None
_reporting_service: InvoiceReportingService | None = None


async def get_invoice_service(
    invoice_store: "IInvoiceStore | None" = None,
    attachment_store: "IAttachmentStore | None" = None,
) -> InvoiceService:
    """
    Get or create InvoiceService instance.

    Creates infrastructure dependencies if not provided; explicit overrides
    produce a fresh, uncached service.

    Args:
        invoice_store: Optional invoice store override
        attachment_store: Optional attachment store override

    Returns:
        Configured InvoiceService
    """
    global _invoice_service

    overridden = invoice_store is not None or attachment_store is not None
    if _invoice_service is not None and not overridden:
        return _invoice_service

    # Lazy import infrastructure
    from facturacion.infrastructure.files import get_attachment_store
    from facturacion.infrastructure.storage.sqlite import get_invoice_store

    service = InvoiceService(
        invoice_store=invoice_store or await get_invoice_store(),
        attachment_store=attachment_store or get_attachment_store(),
    )

    if not overridden:
        _invoice_service = service

    return service


async def get_reporting_service(
    invoice_store: "IInvoiceStore | None" = None,
) -> InvoiceReportingService:
    """
    Get or create InvoiceReportingService instance.

    Args:
        invoice_store: Optional invoice store override

    Returns:
        Configured InvoiceReportingService
    """
    global _reporting_service

    if _reporting_service is not None and invoice_store is None:
        return _reporting_service

    from facturacion.infrastructure.storage.sqlite import get_invoice_store

    service = InvoiceReportingService(invoice_store or await get_invoice_store())

    if invoice_store is None:
        _reporting_service = service

    return service


def reset_services() -> None:
    """
    Reset all singleton service instances.

    Useful for testing or when configuration changes.
    """
    global _invoice_service
    global _reporting_service

    _invoice_service = None
    _reporting_service = None


__all__ = [
    "get_invoice_service",
    "get_reporting_service",
    "reset_services",
]
