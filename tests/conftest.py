"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Generator
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from facturacion.api.auth import get_current_user
from facturacion.api.dependencies import get_app_settings
from facturacion.api.main import app
from facturacion.application.services import reset_services
from facturacion.config import reset_settings
from facturacion.core.entities import AuthenticatedUser, Invoice
from facturacion.infrastructure.files import reset_attachment_store

OWNER_ID = 1
OTHER_OWNER_ID = 2


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Point storage and uploads at a temporary directory for every test."""
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("UPLOADS_DIR", str(tmp_path / "uploads"))
    monkeypatch.setenv("UPLOADS_BASE_URL", "http://test/uploads")
    monkeypatch.setenv("AUTH_JWT_SECRET", "test-secret")
    reset_settings()
    get_app_settings.cache_clear()
    reset_services()
    reset_attachment_store()
    yield
    reset_settings()
    get_app_settings.cache_clear()
    reset_services()
    reset_attachment_store()


@pytest.fixture
def owner() -> AuthenticatedUser:
    """The authenticated user for API tests."""
    return AuthenticatedUser(id=OWNER_ID)


@pytest.fixture
async def api_client(owner: AuthenticatedUser) -> AsyncGenerator[AsyncClient, None]:
    """Async client authenticated as ``owner``; tests add their own overrides."""
    app.dependency_overrides[get_current_user] = lambda: owner
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def sample_invoice() -> Invoice:
    """A stored invoice with an attachment."""
    return Invoice(
        id=10,
        usuario_id=OWNER_ID,
        cliente_id=5,
        fecha_emision=date(2024, 3, 1),
        importe=Decimal("100.00"),
        estado=False,
        numero="INV-1",
        descripcion="Consulting March",
        archivo="1709251200000-abcd1234.pdf",
        cliente_nombre="Acme SL",
    )
