"""
Invoice lifecycle service.

Couples invoice records to their attachment files:
- create/update write the attachment before persisting its filename;
  a replaced file is removed only after the record points at the new one
- delete removes the record even if the file cannot be removed
- clearing an attachment fails before touching the record if the file
  cannot be removed

The database write and the file write are independent actions;
there is no transaction spanning both.
"""

from facturacion.config import get_logger
from facturacion.core.entities.attachment import AttachmentUpload
from facturacion.core.entities.invoice import (
    Invoice,
    InvoiceChanges,
    InvoiceDraft,
    InvoiceListParams,
    InvoicePage,
)
from facturacion.core.exceptions import (
    AttachmentError,
    InvoiceNotFoundError,
    ValidationError,
)
from facturacion.core.interfaces import IAttachmentStore, IInvoiceStore

logger = get_logger(__name__)


class InvoiceService:
    """Owner-scoped invoice operations."""

    def __init__(
        self,
        invoice_store: IInvoiceStore,
        attachment_store: IAttachmentStore,
    ):
        self.invoice_store = invoice_store
        self.attachment_store = attachment_store

    async def create(
        self,
        owner_id: int,
        draft: InvoiceDraft,
        attachment: AttachmentUpload | None = None,
    ) -> Invoice:
        """
        Create an invoice, storing its attachment first when one is given.

        Raises:
            ValidationError: client, date, amount or status missing
            DuplicateInvoiceNumberError: number already used by another invoice
        """
        draft.validate_required()

        archivo = None
        if attachment is not None:
            archivo = await self.attachment_store.store(owner_id, attachment)

        invoice = draft.to_invoice(owner_id, archivo=archivo)
        try:
            created = await self.invoice_store.create_invoice(invoice)
        except Exception:
            if archivo:
                await self._discard_file(owner_id, archivo, reason="create_failed")
            raise

        logger.info(
            "invoice_created",
            invoice_id=created.id,
            owner_id=owner_id,
            has_attachment=archivo is not None,
        )
        return self._with_url(created)

    async def get(self, owner_id: int, invoice_id: int) -> Invoice:
        """
        Fetch one invoice.

        Missing and foreign-owned invoices are reported identically.
        """
        invoice = await self.invoice_store.get_invoice(owner_id, invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)
        return self._with_url(invoice)

    async def update(
        self,
        owner_id: int,
        invoice_id: int,
        changes: InvoiceChanges,
        attachment: AttachmentUpload | None = None,
    ) -> Invoice:
        """
        Apply a partial update, replacing the attachment when one is given.

        Raises:
            InvoiceNotFoundError: invoice missing or owned by someone else
            DuplicateInvoiceNumberError: new number already in use
        """
        current = await self.invoice_store.get_invoice(owner_id, invoice_id)
        if current is None:
            raise InvoiceNotFoundError(invoice_id)

        updated = changes.apply_to(current)

        new_file = None
        if attachment is not None:
            new_file = await self.attachment_store.store(owner_id, attachment)
            updated.archivo = new_file

        try:
            saved = await self.invoice_store.update_invoice(updated)
        except Exception:
            if new_file:
                await self._discard_file(owner_id, new_file, reason="update_failed")
            raise

        if saved is None:
            # Deleted between fetch and update
            if new_file:
                await self._discard_file(owner_id, new_file, reason="update_failed")
            raise InvoiceNotFoundError(invoice_id)

        # The old file goes only once the record names the new one
        if new_file and current.archivo:
            await self._discard_file(owner_id, current.archivo, reason="attachment_replaced")

        logger.info(
            "invoice_updated",
            invoice_id=invoice_id,
            owner_id=owner_id,
            fields=sorted(changes.model_fields_set),
            attachment_replaced=attachment is not None,
        )
        return self._with_url(saved)

    async def delete(self, owner_id: int, invoice_id: int) -> None:
        """
        Delete an invoice and, best effort, its attachment.

        A failure to remove the file is logged; the record is deleted anyway.
        """
        invoice = await self.invoice_store.get_invoice(owner_id, invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)

        if invoice.archivo:
            await self._discard_file(owner_id, invoice.archivo, reason="invoice_deleted")

        await self.invoice_store.delete_invoice(owner_id, invoice_id)
        logger.info("invoice_deleted", invoice_id=invoice_id, owner_id=owner_id)

    async def clear_attachment(self, owner_id: int, invoice_id: int) -> Invoice:
        """
        Remove only the attachment of an invoice.

        Raises:
            InvoiceNotFoundError: invoice missing or owned by someone else
            ValidationError: the invoice has no attachment
            AttachmentError: the file could not be removed; the record is unchanged
        """
        invoice = await self.invoice_store.get_invoice(owner_id, invoice_id)
        if invoice is None:
            raise InvoiceNotFoundError(invoice_id)

        if not invoice.archivo:
            raise ValidationError(
                field="archivo",
                message="The invoice has no attachment",
            )

        await self.attachment_store.delete(owner_id, invoice.archivo)
        await self.invoice_store.set_attachment(owner_id, invoice_id, None)

        logger.info(
            "invoice_attachment_cleared",
            invoice_id=invoice_id,
            owner_id=owner_id,
            filename=invoice.archivo,
        )
        invoice.archivo = None
        return self._with_url(invoice)

    async def list_invoices(
        self, owner_id: int, params: InvoiceListParams
    ) -> InvoicePage:
        """
        Return one page of the owner's invoices.

        ``total`` counts every invoice of the owner regardless of the search
        filter; only the page itself is filtered.
        """
        invoices = await self.invoice_store.list_invoices(owner_id, params)
        total = await self.invoice_store.count_invoices(owner_id)
        return InvoicePage(
            invoices=[self._with_url(invoice) for invoice in invoices],
            total=total,
        )

    async def _discard_file(self, owner_id: int, filename: str, reason: str) -> None:
        try:
            await self.attachment_store.delete(owner_id, filename)
        except AttachmentError as e:
            logger.warning(
                "attachment_cleanup_failed",
                owner_id=owner_id,
                filename=filename,
                reason=reason,
                error=str(e),
            )

    def _with_url(self, invoice: Invoice) -> Invoice:
        invoice.archivo_url = self.attachment_store.url_for(
            invoice.usuario_id, invoice.archivo
        )
        return invoice
