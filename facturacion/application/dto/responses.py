"""Response DTOs for API endpoints.

Pydantic v2 models for API response serialization.
Invoice and client payloads keep the stored (Spanish) field names;
yearly summaries use camelCase keys.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from facturacion.core.entities import (
    Client,
    Invoice,
    MonthlySummary,
    SummaryTotals,
    YearlySummary,
)


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


# --- Invoices ---


class InvoiceResponse(BaseModel):
    """Invoice response DTO."""

    id: int = Field(..., description="Invoice ID")
    usuario_id: int = Field(..., description="Owning user ID")
    cliente_id: int | None = Field(default=None, description="Client ID")
    cliente_nombre: str | None = Field(default=None, description="Client name")
    fecha_emision: date = Field(..., description="Issue date")
    importe: float = Field(..., description="Amount with two decimal places")
    estado: bool = Field(..., description="True when paid")
    numero: str | None = Field(default=None, description="Invoice number")
    descripcion: str | None = Field(default=None, description="Description")
    archivo: str | None = Field(default=None, description="Attachment filename")
    archivo_url: str | None = Field(default=None, description="Attachment URL")

    @classmethod
    def from_entity(cls, invoice: Invoice) -> "InvoiceResponse":
        return cls(
            id=invoice.id or 0,
            usuario_id=invoice.usuario_id,
            cliente_id=invoice.cliente_id,
            cliente_nombre=invoice.cliente_nombre,
            fecha_emision=invoice.fecha_emision,
            importe=float(invoice.importe),
            estado=invoice.estado,
            numero=invoice.numero,
            descripcion=invoice.descripcion,
            archivo=invoice.archivo,
            archivo_url=invoice.archivo_url,
        )


class InvoiceDetailResponse(BaseModel):
    """Single invoice."""

    factura: InvoiceResponse


class InvoiceMutationResponse(BaseModel):
    """Invoice returned after a create or update."""

    message: str
    factura: InvoiceResponse


class InvoiceListResponse(BaseModel):
    """One page of invoices.

    ``total`` is the owner's overall invoice count, not the number of
    search matches.
    """

    facturas: list[InvoiceResponse]
    total: int


# --- Reports ---


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SummaryTotalsResponse(_CamelModel):
    """Year-wide totals and averages."""

    total_facturas: int
    pagadas: int
    no_pagadas: int
    total_importe: float
    importe_pagadas: float
    importe_no_pagadas: float
    promedio_importe: float
    promedio_pagadas: float
    promedio_no_pagadas: float

    @classmethod
    def from_entity(cls, totals: SummaryTotals) -> "SummaryTotalsResponse":
        return cls(
            total_facturas=totals.total_facturas,
            pagadas=totals.pagadas,
            no_pagadas=totals.no_pagadas,
            total_importe=_to_float(totals.total_importe),
            importe_pagadas=_to_float(totals.importe_pagadas),
            importe_no_pagadas=_to_float(totals.importe_no_pagadas),
            promedio_importe=_to_float(totals.promedio_importe),
            promedio_pagadas=_to_float(totals.promedio_pagadas),
            promedio_no_pagadas=_to_float(totals.promedio_no_pagadas),
        )


class MonthlySummaryResponse(_CamelModel):
    """Activity for one month, ``mes`` being ``"01"``..``"12"``."""

    mes: str
    total: int
    pagadas: int
    no_pagadas: int
    total_importe: float

    @classmethod
    def from_entity(cls, month: MonthlySummary) -> "MonthlySummaryResponse":
        return cls(
            mes=month.mes,
            total=month.total,
            pagadas=month.pagadas,
            no_pagadas=month.no_pagadas,
            total_importe=_to_float(month.total_importe),
        )


class YearlySummaryResponse(_CamelModel):
    """Yearly invoice statistics."""

    year: int
    resumen: SummaryTotalsResponse
    mensual: list[MonthlySummaryResponse]

    @classmethod
    def from_entity(cls, summary: YearlySummary) -> "YearlySummaryResponse":
        return cls(
            year=summary.year,
            resumen=SummaryTotalsResponse.from_entity(summary.resumen),
            mensual=[MonthlySummaryResponse.from_entity(m) for m in summary.mensual],
        )


def _to_float(amount: Decimal) -> float:
    return float(amount)


# --- Clients ---


class ClientResponse(BaseModel):
    """Client response DTO."""

    id: int
    usuario_id: int
    nombre: str
    email: str | None = None
    telefono: str | None = None
    direccion_fiscal: str | None = None

    @classmethod
    def from_entity(cls, client: Client) -> "ClientResponse":
        return cls(
            id=client.id or 0,
            usuario_id=client.usuario_id,
            nombre=client.nombre,
            email=client.email,
            telefono=client.telefono,
            direccion_fiscal=client.direccion_fiscal,
        )


class ClientDetailResponse(BaseModel):
    """Single client."""

    cliente: ClientResponse


class ClientMutationResponse(BaseModel):
    """Client returned after a create or update."""

    message: str
    cliente: ClientResponse


class ClientListResponse(BaseModel):
    """One page of clients."""

    model_config = ConfigDict(populate_by_name=True)

    clientes: list[ClientResponse]
    total: int
    total_pages: int = Field(..., alias="totalPages")


# --- Health / Errors ---


class ProviderHealthResponse(BaseModel):
    """Result of probing one dependency."""

    name: str
    available: bool
    latency_ms: float | None = None
    detail: str | None = None
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    uptime_seconds: float
    database: ProviderHealthResponse | None = None
    uploads: ProviderHealthResponse | None = None


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. INVOICE_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=datetime.now)
