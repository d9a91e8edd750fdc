"""
Abstract interfaces for storage providers.

Defines contracts for invoice, client and attachment stores.
Every record operation takes the owning user's id and must scope its
query by it.
"""

from abc import ABC, abstractmethod

from facturacion.core.entities.attachment import AttachmentUpload
from facturacion.core.entities.client import Client
from facturacion.core.entities.invoice import Invoice, InvoiceListParams
from facturacion.core.entities.report import InvoiceAggregate, MonthlyAggregate


class IInvoiceStore(ABC):
    """
    Abstract interface for invoice storage.

    Handles invoice records and the aggregates used by reports.
    """

    @abstractmethod
    async def create_invoice(self, invoice: Invoice) -> Invoice:
        """Insert an invoice. Raises DuplicateInvoiceNumberError on a number clash."""
        pass

    @abstractmethod
    async def get_invoice(self, owner_id: int, invoice_id: int) -> Invoice | None:
        """Get an invoice owned by ``owner_id``."""
        pass

    @abstractmethod
    async def update_invoice(self, invoice: Invoice) -> Invoice | None:
        """Persist all mutable fields of an owned invoice."""
        pass

    @abstractmethod
    async def delete_invoice(self, owner_id: int, invoice_id: int) -> bool:
        """Delete an owned invoice record."""
        pass

    @abstractmethod
    async def set_attachment(
        self, owner_id: int, invoice_id: int, archivo: str | None
    ) -> bool:
        """Set or clear the attachment filename of an owned invoice."""
        pass

    @abstractmethod
    async def list_invoices(
        self, owner_id: int, params: InvoiceListParams
    ) -> list[Invoice]:
        """Search, sort and paginate an owner's invoices."""
        pass

    @abstractmethod
    async def count_invoices(self, owner_id: int) -> int:
        """Count all invoices of an owner."""
        pass

    @abstractmethod
    async def yearly_aggregate(self, owner_id: int, year: int) -> InvoiceAggregate:
        """Counts and sums over an owner's invoices issued in ``year``."""
        pass

    @abstractmethod
    async def monthly_aggregates(
        self, owner_id: int, year: int
    ) -> list[MonthlyAggregate]:
        """Per-month counts and sums, only for months with invoices."""
        pass


class IClientStore(ABC):
    """Abstract interface for client storage."""

    @abstractmethod
    async def create_client(self, client: Client) -> Client:
        """Insert a client. Raises DuplicateClientEmailError on an email clash."""
        pass

    @abstractmethod
    async def get_client(self, owner_id: int, client_id: int) -> Client | None:
        """Get a client owned by ``owner_id``."""
        pass

    @abstractmethod
    async def update_client(self, client: Client) -> Client | None:
        """Persist all mutable fields of an owned client."""
        pass

    @abstractmethod
    async def delete_client(self, owner_id: int, client_id: int) -> bool:
        """Delete an owned client."""
        pass

    @abstractmethod
    async def list_clients(
        self, owner_id: int, limit: int = 10, offset: int = 0
    ) -> list[Client]:
        """List an owner's clients ordered by name."""
        pass

    @abstractmethod
    async def count_clients(self, owner_id: int) -> int:
        """Count an owner's clients."""
        pass


class IAttachmentStore(ABC):
    """
    Abstract interface for invoice attachment files.

    Files live in a per-user namespace: ``<root>/<user_id>/<filename>``.
    """

    @abstractmethod
    async def store(self, user_id: int, upload: AttachmentUpload) -> str:
        """Write a new file and return its generated filename."""
        pass

    @abstractmethod
    async def replace(
        self, user_id: int, old_filename: str | None, upload: AttachmentUpload
    ) -> str:
        """Write a new file, then best-effort delete the old one."""
        pass

    @abstractmethod
    async def delete(self, user_id: int, filename: str) -> None:
        """Delete a file. Raises AttachmentNotFoundError or AttachmentStorageError."""
        pass

    @abstractmethod
    def url_for(self, user_id: int, filename: str | None) -> str | None:
        """Public URL of a file, or None without a filename."""
        pass
