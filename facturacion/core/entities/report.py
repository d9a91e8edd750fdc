"""
Yearly invoice report entities.

Summaries are derived on demand and never persisted.
"""

from dataclasses import dataclass
from decimal import Decimal

from pydantic import BaseModel, Field

MONTHS = tuple(f"{month:02d}" for month in range(1, 13))


@dataclass
class InvoiceAggregate:
    """Raw counts and exact sums for a group of invoices."""

    total: int = 0
    pagadas: int = 0
    no_pagadas: int = 0
    total_importe: Decimal = Decimal("0.00")
    importe_pagadas: Decimal = Decimal("0.00")
    importe_no_pagadas: Decimal = Decimal("0.00")


@dataclass
class MonthlyAggregate:
    """Raw counts and sum for one calendar month."""

    mes: str
    total: int = 0
    pagadas: int = 0
    no_pagadas: int = 0
    total_importe: Decimal = Decimal("0.00")


class SummaryTotals(BaseModel):
    """Year-wide totals and averages."""

    total_facturas: int = 0
    pagadas: int = 0
    no_pagadas: int = 0
    total_importe: Decimal = Decimal("0.00")
    importe_pagadas: Decimal = Decimal("0.00")
    importe_no_pagadas: Decimal = Decimal("0.00")
    promedio_importe: Decimal = Decimal("0.00")
    promedio_pagadas: Decimal = Decimal("0.00")
    promedio_no_pagadas: Decimal = Decimal("0.00")


class MonthlySummary(BaseModel):
    """Activity for one calendar month."""

    mes: str
    total: int = 0
    pagadas: int = 0
    no_pagadas: int = 0
    total_importe: Decimal = Decimal("0.00")


class YearlySummary(BaseModel):
    """Invoice statistics for one user and calendar year."""

    year: int
    resumen: SummaryTotals = Field(default_factory=SummaryTotals)
    mensual: list[MonthlySummary] = Field(default_factory=list)
