"""Core interfaces (ports) for dependency injection."""

from facturacion.core.interfaces.storage import (
    IAttachmentStore,
    IClientStore,
    IInvoiceStore,
)

__all__ = [
    "IAttachmentStore",
    "IClientStore",
    "IInvoiceStore",
]
