"""Request DTOs for API endpoints.

Pydantic v2 models for JSON request validation. Invoice payloads arrive
as multipart forms and are parsed in the API layer instead.
"""

from pydantic import BaseModel, Field


class CreateClientRequest(BaseModel):
    """Request to create a client."""

    nombre: str = Field(..., min_length=1, description="Client name")
    email: str | None = Field(
        default=None,
        description="Contact email, unique across all clients",
        examples=["facturas@acme.es"],
    )
    telefono: str | None = Field(default=None, description="Phone number")
    direccion_fiscal: str | None = Field(default=None, description="Billing address")


class UpdateClientRequest(BaseModel):
    """Partial client update. Empty or missing values keep the stored value."""

    nombre: str | None = None
    email: str | None = None
    telefono: str | None = None
    direccion_fiscal: str | None = None
