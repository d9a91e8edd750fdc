"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.
"""

from facturacion.application.dto.requests import (
    CreateClientRequest,
    UpdateClientRequest,
)
from facturacion.application.dto.responses import (
    ClientDetailResponse,
    ClientListResponse,
    ClientMutationResponse,
    ClientResponse,
    ErrorResponse,
    HealthResponse,
    InvoiceDetailResponse,
    InvoiceListResponse,
    InvoiceMutationResponse,
    InvoiceResponse,
    MessageResponse,
    MonthlySummaryResponse,
    ProviderHealthResponse,
    SummaryTotalsResponse,
    YearlySummaryResponse,
)

__all__ = [
    # Requests
    "CreateClientRequest",
    "UpdateClientRequest",
    # Responses
    "ClientDetailResponse",
    "ClientListResponse",
    "ClientMutationResponse",
    "ClientResponse",
    "ErrorResponse",
    "HealthResponse",
    "InvoiceDetailResponse",
    "InvoiceListResponse",
    "InvoiceMutationResponse",
    "InvoiceResponse",
    "MessageResponse",
    "MonthlySummaryResponse",
    "ProviderHealthResponse",
    "SummaryTotalsResponse",
    "YearlySummaryResponse",
]
