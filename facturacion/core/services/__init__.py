"""
Core business logic services.

Layer-pure services that depend only on:
- facturacion/core/entities/*
- facturacion/core/interfaces/*
- facturacion/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from facturacion.core.services.invoice_reporting import (
    InvoiceReportingService,
    average,
    parse_year,
)
from facturacion.core.services.invoice_service import InvoiceService

__all__ = [
    "InvoiceService",
    "InvoiceReportingService",
    "average",
    "parse_year",
]
