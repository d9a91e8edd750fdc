"""
SQLite implementation of invoice storage.

Handles invoice records and the yearly/monthly aggregates behind reports.
Amounts are stored as integer cents.
"""

from datetime import date
from decimal import Decimal

import aiosqlite

from facturacion.config import get_logger
from facturacion.core.entities import (
    Invoice,
    InvoiceAggregate,
    InvoiceListParams,
    MonthlyAggregate,
    to_money,
)
from facturacion.core.exceptions import (
    DatabaseError,
    DuplicateInvoiceNumberError,
    ValidationError,
)
from facturacion.core.interfaces import IInvoiceStore
from facturacion.infrastructure.storage.sqlite.connection import ConnectionPool
from facturacion.infrastructure.storage.sqlite.invoice_query import (
    build_count_query,
    build_get_query,
    build_list_query,
)

logger = get_logger(__name__)


def to_cents(amount: Decimal) -> int:
    """Convert a money amount to integer cents."""
    return int(to_money(amount).scaleb(2))


def from_cents(cents: int | None) -> Decimal:
    """Convert integer cents back to a two-place Decimal."""
    return to_money(Decimal(cents or 0).scaleb(-2))


class SQLiteInvoiceStore(IInvoiceStore):
    """SQLite implementation of invoice storage."""

    def __init__(self, pool: ConnectionPool):
        self.pool = pool

    async def create_invoice(self, invoice: Invoice) -> Invoice:
        """Create a new invoice record."""
        try:
            async with self.pool.transaction() as conn:
                await self._check_client_owner(conn, invoice)
                cursor = await conn.execute(
                    """
                    INSERT INTO facturas (
                        usuario_id, cliente_id, fecha_emision, importe_centimos,
                        estado, numero, descripcion, archivo
                    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        invoice.usuario_id,
                        invoice.cliente_id,
                        invoice.fecha_emision.isoformat(),
                        to_cents(invoice.importe),
                        1 if invoice.estado else 0,
                        invoice.numero,
                        invoice.descripcion,
                        invoice.archivo,
                    ),
                )
                invoice_id = cursor.lastrowid
        except aiosqlite.IntegrityError as e:
            raise self._integrity_error(e, invoice, "create_invoice") from e

        logger.debug("invoice_inserted", invoice_id=invoice_id, owner_id=invoice.usuario_id)
        created = await self.get_invoice(invoice.usuario_id, invoice_id)
        return created if created is not None else invoice.model_copy(update={"id": invoice_id})

    async def get_invoice(self, owner_id: int, invoice_id: int) -> Invoice | None:
        """Get an owned invoice with its client name."""
        sql, args = build_get_query(owner_id, invoice_id)
        async with self.pool.acquire() as conn:
            cursor = await conn.execute(sql, args)
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_invoice(row)

    async def update_invoice(self, invoice: Invoice) -> Invoice | None:
        """Persist all mutable fields of an owned invoice."""
        try:
            async with self.pool.transaction() as conn:
                cursor = await conn.execute(
                    """
                    UPDATE facturas SET
                        cliente_id = ?, fecha_emision = ?, importe_centimos = ?,
                        estado = ?, numero = ?, descripcion = ?, archivo = ?
                    WHERE id = ? AND usuario_id = ?
                    """,
                    (
                        invoice.cliente_id,
                        invoice.fecha_emision.isoformat(),
                        to_cents(invoice.importe),
                        1 if invoice.estado else 0,
                        invoice.numero,
                        invoice.descripcion,
                        invoice.archivo,
                        invoice.id,
                        invoice.usuario_id,
                    ),
                )
                updated = cursor.rowcount > 0
                if updated:
                    await self._check_client_owner(conn, invoice)
        except aiosqlite.IntegrityError as e:
            raise self._integrity_error(e, invoice, "update_invoice") from e

        if not updated:
            return None
        return await self.get_invoice(invoice.usuario_id, invoice.id)

    async def delete_invoice(self, owner_id: int, invoice_id: int) -> bool:
        """Delete an owned invoice record."""
        async with self.pool.transaction() as conn:
            cursor = await conn.execute(
                "DELETE FROM facturas WHERE id = ? AND usuario_id = ?",
                (invoice_id, owner_id),
            )
            deleted = cursor.rowcount > 0

        if deleted:
            logger.debug("invoice_row_deleted", invoice_id=invoice_id, owner_id=owner_id)
        return deleted

    async def set_attachment(
        self, owner_id: int, invoice_id: int, archivo: str | None
    ) -> bool:
        """Set or clear the attachment filename of an owned invoice."""
        async with self.pool.transaction() as conn:
            cursor = await conn.execute(
                "UPDATE facturas SET archivo = ? WHERE id = ? AND usuario_id = ?",
                (archivo, invoice_id, owner_id),
            )
            return cursor.rowcount > 0

    async def list_invoices(
        self, owner_id: int, params: InvoiceListParams
    ) -> list[Invoice]:
        """Search, sort and paginate an owner's invoices."""
        sql, args = build_list_query(owner_id, params)
        async with self.pool.acquire() as conn:
            cursor = await conn.execute(sql, args)
            rows = await cursor.fetchall()
            return [self._row_to_invoice(row) for row in rows]

    async def count_invoices(self, owner_id: int) -> int:
        """Count all invoices of an owner."""
        sql, args = build_count_query(owner_id)
        async with self.pool.acquire() as conn:
            cursor = await conn.execute(sql, args)
            row = await cursor.fetchone()
            return row[0] if row else 0

    # Aggregates

    async def yearly_aggregate(self, owner_id: int, year: int) -> InvoiceAggregate:
        """Counts and sums over an owner's invoices issued in ``year``."""
        async with self.pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT
                    COUNT(*) AS total,
                    COALESCE(SUM(CASE WHEN estado = 1 THEN 1 ELSE 0 END), 0) AS pagadas,
                    COALESCE(SUM(CASE WHEN estado = 0 THEN 1 ELSE 0 END), 0) AS no_pagadas,
                    COALESCE(SUM(importe_centimos), 0) AS total_importe,
                    COALESCE(SUM(CASE WHEN estado = 1 THEN importe_centimos ELSE 0 END), 0)
                        AS importe_pagadas,
                    COALESCE(SUM(CASE WHEN estado = 0 THEN importe_centimos ELSE 0 END), 0)
                        AS importe_no_pagadas
                FROM facturas
                WHERE usuario_id = ? AND strftime('%Y', fecha_emision) = ?
                """,
                (owner_id, f"{year:04d}"),
            )
            row = await cursor.fetchone()

        return InvoiceAggregate(
            total=row["total"],
            pagadas=row["pagadas"],
            no_pagadas=row["no_pagadas"],
            total_importe=from_cents(row["total_importe"]),
            importe_pagadas=from_cents(row["importe_pagadas"]),
            importe_no_pagadas=from_cents(row["importe_no_pagadas"]),
        )

    async def monthly_aggregates(
        self, owner_id: int, year: int
    ) -> list[MonthlyAggregate]:
        """Per-month counts and sums, only for months with invoices."""
        async with self.pool.acquire() as conn:
            cursor = await conn.execute(
                """
                SELECT
                    strftime('%m', fecha_emision) AS mes,
                    COUNT(*) AS total,
                    SUM(CASE WHEN estado = 1 THEN 1 ELSE 0 END) AS pagadas,
                    SUM(CASE WHEN estado = 0 THEN 1 ELSE 0 END) AS no_pagadas,
                    SUM(importe_centimos) AS total_importe
                FROM facturas
                WHERE usuario_id = ? AND strftime('%Y', fecha_emision) = ?
                GROUP BY mes
                ORDER BY mes
                """,
                (owner_id, f"{year:04d}"),
            )
            rows = await cursor.fetchall()

        return [
            MonthlyAggregate(
                mes=row["mes"],
                total=row["total"],
                pagadas=row["pagadas"],
                no_pagadas=row["no_pagadas"],
                total_importe=from_cents(row["total_importe"]),
            )
            for row in rows
        ]

    # Helper methods

    async def _check_client_owner(self, conn: aiosqlite.Connection, invoice: Invoice) -> None:
        """Reject a client that is missing or belongs to another user."""
        if invoice.cliente_id is None:
            return
        cursor = await conn.execute(
            "SELECT 1 FROM clientes WHERE id = ? AND usuario_id = ?",
            (invoice.cliente_id, invoice.usuario_id),
        )
        if await cursor.fetchone() is None:
            raise ValidationError(
                field="cliente_id",
                message="Client does not exist",
                value=invoice.cliente_id,
            )

    def _integrity_error(
        self, error: aiosqlite.IntegrityError, invoice: Invoice, operation: str
    ) -> Exception:
        message = str(error)
        if "facturas.numero" in message:
            logger.info("duplicate_invoice_number", numero=invoice.numero)
            return DuplicateInvoiceNumberError(invoice.numero)
        if "FOREIGN KEY" in message:
            return ValidationError(
                field="cliente_id",
                message="Client does not exist",
                value=invoice.cliente_id,
            )
        logger.error("invoice_integrity_error", operation=operation, error=message)
        return DatabaseError(operation, message)

    def _row_to_invoice(self, row: aiosqlite.Row) -> Invoice:
        """Convert database row to Invoice entity."""
        return Invoice(
            id=row["id"],
            usuario_id=row["usuario_id"],
            cliente_id=row["cliente_id"],
            fecha_emision=date.fromisoformat(row["fecha_emision"]),
            importe=from_cents(row["importe_centimos"]),
            estado=bool(row["estado"]),
            numero=row["numero"],
            descripcion=row["descripcion"],
            archivo=row["archivo"],
            cliente_nombre=row["cliente_nombre"],
        )
