"""Core domain entities."""

from facturacion.core.entities.attachment import AttachmentUpload
from facturacion.core.entities.client import (
    DEFAULT_CLIENT_PAGE_SIZE,
    Client,
    ClientChanges,
)
from facturacion.core.entities.invoice import (
    DEFAULT_PAGE_SIZE,
    FIELD_POLICIES,
    SORTABLE_FIELDS,
    Invoice,
    InvoiceChanges,
    InvoiceDraft,
    InvoiceListParams,
    InvoicePage,
    SortOrder,
    UpdatePolicy,
    parse_date,
    to_money,
)
from facturacion.core.entities.report import (
    MONTHS,
    InvoiceAggregate,
    MonthlyAggregate,
    MonthlySummary,
    SummaryTotals,
    YearlySummary,
)
from facturacion.core.entities.user import AuthenticatedUser

__all__ = [
    # Invoice entities
    "Invoice",
    "InvoiceDraft",
    "InvoiceChanges",
    "InvoiceListParams",
    "InvoicePage",
    "SortOrder",
    "UpdatePolicy",
    "FIELD_POLICIES",
    "SORTABLE_FIELDS",
    "DEFAULT_PAGE_SIZE",
    "to_money",
    "parse_date",
    # Client entities
    "Client",
    "ClientChanges",
    "DEFAULT_CLIENT_PAGE_SIZE",
    # Report entities
    "MONTHS",
    "InvoiceAggregate",
    "MonthlyAggregate",
    "MonthlySummary",
    "SummaryTotals",
    "YearlySummary",
    # Attachments
    "AttachmentUpload",
    # Identity
    "AuthenticatedUser",
]
