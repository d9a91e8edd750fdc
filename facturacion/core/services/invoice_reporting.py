"""
Yearly invoice reporting.

Builds totals, paid/unpaid breakdowns and monthly activity from the
store's grouped aggregates using exact Decimal arithmetic.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from facturacion.config import get_logger
from facturacion.core.entities.invoice import MONEY_QUANTUM, leading_int
from facturacion.core.entities.report import (
    MONTHS,
    MonthlySummary,
    SummaryTotals,
    YearlySummary,
)
from facturacion.core.exceptions import ValidationError
from facturacion.core.interfaces import IInvoiceStore

logger = get_logger(__name__)

ZERO = Decimal("0.00")


def parse_year(value: Any) -> int:
    """Parse a positive leading-integer year or raise ValidationError."""
    year = leading_int(value)
    if year is None or year <= 0:
        raise ValidationError(field="year", message="Invalid year", value=value)
    return year


def average(amount: Decimal, count: int) -> Decimal:
    """Mean rounded half-up to cents; an empty group averages to zero."""
    if count == 0:
        return ZERO
    return (amount / count).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


class InvoiceReportingService:
    """Computes yearly summaries for one owner at a time."""

    def __init__(self, invoice_store: IInvoiceStore):
        self.invoice_store = invoice_store

    async def yearly_summary(self, owner_id: int, year: Any) -> YearlySummary:
        """
        Summarize the owner's invoices issued in ``year``.

        All twelve months are always present, zero-filled when empty.
        """
        year = parse_year(year)

        totals = await self.invoice_store.yearly_aggregate(owner_id, year)
        monthly = {
            row.mes: row
            for row in await self.invoice_store.monthly_aggregates(owner_id, year)
        }

        resumen = SummaryTotals(
            total_facturas=totals.total,
            pagadas=totals.pagadas,
            no_pagadas=totals.no_pagadas,
            total_importe=totals.total_importe,
            importe_pagadas=totals.importe_pagadas,
            importe_no_pagadas=totals.importe_no_pagadas,
            promedio_importe=average(totals.total_importe, totals.total),
            promedio_pagadas=average(totals.importe_pagadas, totals.pagadas),
            promedio_no_pagadas=average(totals.importe_no_pagadas, totals.no_pagadas),
        )

        mensual = []
        for mes in MONTHS:
            row = monthly.get(mes)
            if row is None:
                mensual.append(MonthlySummary(mes=mes))
                continue
            mensual.append(
                MonthlySummary(
                    mes=mes,
                    total=row.total,
                    pagadas=row.pagadas,
                    no_pagadas=row.no_pagadas,
                    total_importe=row.total_importe,
                )
            )

        logger.debug(
            "yearly_summary_computed",
            owner_id=owner_id,
            year=year,
            invoices=resumen.total_facturas,
        )
        return YearlySummary(year=year, resumen=resumen, mensual=mensual)
