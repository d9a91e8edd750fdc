"""
Client domain entities.
"""

from typing import Any

from pydantic import BaseModel, field_validator

# Clients page by 10 by default.
DEFAULT_CLIENT_PAGE_SIZE = 10


class Client(BaseModel):
    """Billing client owned by a user."""

    id: int | None = None
    usuario_id: int
    nombre: str
    email: str | None = None
    telefono: str | None = None
    direccion_fiscal: str | None = None

    @field_validator("email", "telefono", "direccion_fiscal", mode="before")
    @classmethod
    def empty_to_none(cls, v: Any) -> Any:
        """Store empty optional strings as NULL."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class ClientChanges(BaseModel):
    """
    Partial client update.

    Only truthy values overwrite, so empty strings keep the stored value.
    """

    nombre: str | None = None
    email: str | None = None
    telefono: str | None = None
    direccion_fiscal: str | None = None

    def apply_to(self, client: Client) -> Client:
        """Return a copy of ``client`` with these changes applied."""
        updates = {
            name: value
            for name, value in self.model_dump().items()
            if value
        }
        return client.model_copy(update=updates)
