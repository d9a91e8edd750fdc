"""Fixtures for service tests; stores are replaced by mocks."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from facturacion.core.interfaces import IAttachmentStore, IInvoiceStore


@pytest.fixture
def invoice_store() -> AsyncMock:
    """Invoice store whose records echo back what was written."""
    store = AsyncMock(spec=IInvoiceStore)

    async def create(invoice):
        return invoice.model_copy(update={"id": 99})

    async def update(invoice):
        return invoice

    store.create_invoice.side_effect = create
    store.update_invoice.side_effect = update
    store.count_invoices.return_value = 0
    store.list_invoices.return_value = []
    return store


@pytest.fixture
def attachment_store() -> AsyncMock:
    """Attachment store with deterministic filenames and URLs."""
    store = AsyncMock(spec=IAttachmentStore)
    store.store.return_value = "stored.pdf"
    store.url_for = MagicMock(
        side_effect=lambda user_id, filename: (
            f"http://test/uploads/{user_id}/{filename}" if filename else None
        )
    )
    return store
