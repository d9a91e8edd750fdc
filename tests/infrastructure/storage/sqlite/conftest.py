"""Pytest fixtures for SQLite storage tests."""

from collections.abc import AsyncGenerator
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

from facturacion.core.entities import Client, Invoice
from facturacion.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteClientStore,
    SQLiteInvoiceStore,
)
from facturacion.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "test.db"


@pytest.fixture
async def migrated_db(temp_db_path: Path) -> Path:
    """Temporary database with every migration applied."""
    results = await initialize_database(temp_db_path, create_backup_before=False)
    assert all(r.success for r in results)
    return temp_db_path


@pytest.fixture
async def pool(migrated_db: Path) -> AsyncGenerator[ConnectionPool, None]:
    """Connection pool over the migrated database."""
    pool = ConnectionPool(migrated_db, pool_size=2)
    await pool.initialize()
    yield pool
    await pool.close()


@pytest.fixture
def invoice_store(pool: ConnectionPool) -> SQLiteInvoiceStore:
    return SQLiteInvoiceStore(pool)


@pytest.fixture
def client_store(pool: ConnectionPool) -> SQLiteClientStore:
    return SQLiteClientStore(pool)


@pytest.fixture
async def acme(client_store: SQLiteClientStore) -> Client:
    """A client of user 1."""
    return await client_store.create_client(
        Client(usuario_id=1, nombre="Acme SL", email="billing@acme.es")
    )


@pytest.fixture
async def globex(client_store: SQLiteClientStore) -> Client:
    """Another client of user 1."""
    return await client_store.create_client(Client(usuario_id=1, nombre="Globex"))


def make_invoice(cliente_id: int, **overrides) -> Invoice:
    """Build an unsaved invoice for user 1."""
    fields = {
        "usuario_id": 1,
        "cliente_id": cliente_id,
        "fecha_emision": date(2024, 3, 1),
        "importe": Decimal("100.00"),
        "estado": False,
    }
    fields.update(overrides)
    return Invoice(**fields)


@pytest.fixture
def invoice_factory():
    """Factory for unsaved invoices."""
    return make_invoice
