"""SQLite storage implementations."""

from facturacion.infrastructure.storage.sqlite.client_store import SQLiteClientStore
from facturacion.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_pool,
)
from facturacion.infrastructure.storage.sqlite.invoice_store import SQLiteInvoiceStore

# Singleton instances
_invoice_store: SQLiteInvoiceStore | None = None
_client_store: SQLiteClientStore | None = None


async def get_invoice_store() -> SQLiteInvoiceStore:
    """Get singleton invoice store instance."""
    global _invoice_store
    if _invoice_store is None:
        _invoice_store = SQLiteInvoiceStore(await get_pool())
    return _invoice_store


async def get_client_store() -> SQLiteClientStore:
    """Get singleton client store instance."""
    global _client_store
    if _client_store is None:
        _client_store = SQLiteClientStore(await get_pool())
    return _client_store


def reset_stores() -> None:
    """Drop store singletons so the next call binds to a fresh pool."""
    global _invoice_store, _client_store
    _invoice_store = None
    _client_store = None


__all__ = [
    # Connection
    "ConnectionPool",
    "get_pool",
    "close_pool",
    # Store classes
    "SQLiteClientStore",
    "SQLiteInvoiceStore",
    # Factory functions
    "get_client_store",
    "get_invoice_store",
    "reset_stores",
]
