"""API route modules."""

from facturacion.api.routes.clients import router as clients_router
from facturacion.api.routes.health import router as health_router
from facturacion.api.routes.invoices import router as invoices_router

__all__ = [
    "clients_router",
    "health_router",
    "invoices_router",
]
