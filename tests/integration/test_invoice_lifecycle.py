"""End-to-end invoice lifecycle over a real database and upload directory."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from httpx import AsyncClient

from facturacion.api.auth import get_current_user
from facturacion.api.dependencies import get_cli_store, get_invoices, get_reporting
from facturacion.api.main import app
from facturacion.core.entities import AuthenticatedUser
from facturacion.core.services import InvoiceReportingService, InvoiceService
from facturacion.infrastructure.files import LocalAttachmentStore
from facturacion.infrastructure.storage.sqlite import (
    ConnectionPool,
    SQLiteClientStore,
    SQLiteInvoiceStore,
)
from facturacion.infrastructure.storage.sqlite.migrations import initialize_database


@pytest.fixture
async def pool(tmp_path: Path) -> AsyncGenerator[ConnectionPool, None]:
    db_path = tmp_path / "lifecycle.db"
    await initialize_database(db_path, create_backup_before=False)
    pool = ConnectionPool(db_path, pool_size=2)
    await pool.initialize()
    yield pool
    await pool.close()


@pytest.fixture
def uploads(tmp_path: Path) -> Path:
    return tmp_path / "files"


@pytest.fixture
def live(api_client: AsyncClient, pool: ConnectionPool, uploads: Path) -> AsyncClient:
    invoice_store = SQLiteInvoiceStore(pool)
    service = InvoiceService(
        invoice_store=invoice_store,
        attachment_store=LocalAttachmentStore(uploads, "http://test/uploads"),
    )
    client_store = SQLiteClientStore(pool)
    app.dependency_overrides[get_invoices] = lambda: service
    app.dependency_overrides[get_reporting] = lambda: InvoiceReportingService(invoice_store)
    app.dependency_overrides[get_cli_store] = lambda: client_store
    return api_client


async def test_invoice_lifecycle(live: AsyncClient, uploads: Path):
    response = await live.post("/api/clients", json={"nombre": "Acme SL"})
    assert response.status_code == 201
    client_id = response.json()["cliente"]["id"]

    # Create with an attachment
    response = await live.post(
        "/api/invoices",
        data={
            "cliente_id": str(client_id),
            "fecha_emision": "2024-03-01",
            "importe": "100.00",
            "estado": "false",
        },
        files={"archivo": ("factura.pdf", b"%PDF-1.4", "application/pdf")},
    )
    assert response.status_code == 201
    created = response.json()["factura"]
    invoice_id = created["id"]
    stored_file = uploads / "1" / created["archivo"]
    assert stored_file.read_bytes() == b"%PDF-1.4"
    assert created["cliente_nombre"] == "Acme SL"

    # Partial update leaves amount and date alone
    response = await live.put(
        f"/api/invoices/{invoice_id}", data={"estado": "true", "numero": "INV-1"}
    )
    assert response.status_code == 200
    updated = response.json()["factura"]
    assert updated["importe"] == 100.0
    assert updated["estado"] is True
    assert updated["numero"] == "INV-1"
    assert updated["fecha_emision"] == "2024-03-01"

    response = await live.get("/api/invoices", params={"search": "inv-1"})
    assert [f["id"] for f in response.json()["facturas"]] == [invoice_id]

    response = await live.get("/api/invoices/summary", params={"year": "2024"})
    summary = response.json()
    assert summary["resumen"]["pagadas"] == 1
    assert summary["resumen"]["importePagadas"] == 100.0
    assert summary["mensual"][2]["total"] == 1

    # Removing the attachment deletes the file and clears the record
    response = await live.delete(f"/api/invoices/{invoice_id}/attachment")
    assert response.status_code == 200
    assert not stored_file.exists()
    response = await live.get(f"/api/invoices/{invoice_id}")
    assert response.json()["factura"]["archivo"] is None

    response = await live.delete(f"/api/invoices/{invoice_id}")
    assert response.status_code == 200
    response = await live.get(f"/api/invoices/{invoice_id}")
    assert response.status_code == 404


async def test_duplicate_number_keeps_no_orphan_file(live: AsyncClient, uploads: Path):
    response = await live.post("/api/clients", json={"nombre": "Acme SL"})
    client_id = str(response.json()["cliente"]["id"])
    form = {
        "cliente_id": client_id,
        "fecha_emision": "2024-05-02",
        "importe": "10",
        "estado": "0",
        "numero": "A-1",
    }

    first = await live.post("/api/invoices", data=form)
    assert first.status_code == 201

    second = await live.post(
        "/api/invoices",
        data=form,
        files={"archivo": ("dup.pdf", b"%PDF", "application/pdf")},
    )
    assert second.status_code == 400
    assert second.json()["error_code"] == "DUPLICATE_INVOICE_NUMBER"
    assert list((uploads / "1").iterdir()) == []


async def test_other_owner_sees_nothing(live: AsyncClient):
    response = await live.post("/api/clients", json={"nombre": "Acme SL"})
    client_id = str(response.json()["cliente"]["id"])
    response = await live.post(
        "/api/invoices",
        data={"cliente_id": client_id, "fecha_emision": "2024-01-01", "importe": "5", "estado": "1"},
    )
    invoice_id = response.json()["factura"]["id"]

    app.dependency_overrides[get_current_user] = lambda: AuthenticatedUser(id=2)

    assert (await live.get(f"/api/invoices/{invoice_id}")).status_code == 404
    assert (await live.put(f"/api/invoices/{invoice_id}", data={"estado": "0"})).status_code == 404
    assert (await live.delete(f"/api/invoices/{invoice_id}")).status_code == 404
    assert (await live.get("/api/invoices")).json() == {"facturas": [], "total": 0}
    assert (await live.get(f"/api/clients/{client_id}")).status_code == 404


async def test_failed_update_keeps_attachment(live: AsyncClient, uploads: Path):
    response = await live.post("/api/clients", json={"nombre": "Acme SL"})
    client_id = str(response.json()["cliente"]["id"])
    form = {"cliente_id": client_id, "fecha_emision": "2024-06-01", "importe": "10", "estado": "0"}

    response = await live.post(
        "/api/invoices",
        data=form,
        files={"archivo": ("a.pdf", b"%PDF-A", "application/pdf")},
    )
    first = response.json()["factura"]
    await live.post("/api/invoices", data={**form, "numero": "TAKEN"})

    response = await live.put(
        f"/api/invoices/{first['id']}",
        data={"numero": "TAKEN"},
        files={"archivo": ("b.pdf", b"%PDF-B", "application/pdf")},
    )
    assert response.status_code == 400
    assert response.json()["error_code"] == "DUPLICATE_INVOICE_NUMBER"

    stored = (await live.get(f"/api/invoices/{first['id']}")).json()["factura"]
    assert stored["archivo"] == first["archivo"]
    assert [p.name for p in (uploads / "1").iterdir()] == [first["archivo"]]
    assert (uploads / "1" / first["archivo"]).read_bytes() == b"%PDF-A"

    response = await live.delete(f"/api/invoices/{first['id']}/attachment")
    assert response.status_code == 200


async def test_successful_update_swaps_attachment(live: AsyncClient, uploads: Path):
    response = await live.post("/api/clients", json={"nombre": "Acme SL"})
    client_id = str(response.json()["cliente"]["id"])

    response = await live.post(
        "/api/invoices",
        data={"cliente_id": client_id, "fecha_emision": "2024-06-01", "importe": "10", "estado": "0"},
        files={"archivo": ("a.pdf", b"%PDF-A", "application/pdf")},
    )
    invoice = response.json()["factura"]

    response = await live.put(
        f"/api/invoices/{invoice['id']}",
        files={"archivo": ("b.pdf", b"%PDF-B", "application/pdf")},
    )
    assert response.status_code == 200
    replaced = response.json()["factura"]["archivo"]

    assert replaced != invoice["archivo"]
    assert [p.name for p in (uploads / "1").iterdir()] == [replaced]


async def test_foreign_client_rejected(live: AsyncClient):
    app.dependency_overrides[get_current_user] = lambda: AuthenticatedUser(id=2)
    response = await live.post("/api/clients", json={"nombre": "Secret Corp"})
    foreign_id = str(response.json()["cliente"]["id"])

    app.dependency_overrides[get_current_user] = lambda: AuthenticatedUser(id=1)
    response = await live.post("/api/clients", json={"nombre": "Acme SL"})
    own_id = str(response.json()["cliente"]["id"])
    form = {"fecha_emision": "2024-01-01", "importe": "5", "estado": "1"}

    response = await live.post("/api/invoices", data={**form, "cliente_id": foreign_id})
    assert response.status_code == 400
    assert response.json()["error_code"] == "VALIDATION_ERROR"

    response = await live.post("/api/invoices", data={**form, "cliente_id": own_id})
    invoice_id = response.json()["factura"]["id"]

    response = await live.put(f"/api/invoices/{invoice_id}", data={"cliente_id": foreign_id})
    assert response.status_code == 400

    listed = (await live.get("/api/invoices")).json()["facturas"]
    assert [f["cliente_nombre"] for f in listed] == ["Acme SL"]
