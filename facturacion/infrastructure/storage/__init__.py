"""Storage infrastructure implementations."""

from facturacion.infrastructure.storage.sqlite import (
    SQLiteClientStore,
    SQLiteInvoiceStore,
    close_pool,
    get_pool,
)

__all__ = [
    # SQLite stores
    "SQLiteClientStore",
    "SQLiteInvoiceStore",
    # Connection pool
    "get_pool",
    "close_pool",
]
