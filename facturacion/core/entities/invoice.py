"""
Invoice domain entities with Pydantic v2 validation.

Monetary fields are exact ``Decimal`` values with two decimal places.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any

from pydantic import BaseModel, field_validator

from facturacion.core.exceptions import ValidationError

MONEY_QUANTUM = Decimal("0.01")

# Invoices page by 5 by default; clients page by 10.
DEFAULT_PAGE_SIZE = 5
DEFAULT_SORT_FIELD = "fecha_emision"

SORTABLE_FIELDS = frozenset(
    {
        "id",
        "fecha_emision",
        "importe",
        "estado",
        "numero",
        "descripcion",
        "cliente_id",
        "cliente_nombre",
    }
)


def to_money(value: Any) -> Decimal:
    """Convert a number or numeric string to a two-place Decimal."""
    if isinstance(value, bool):
        raise ValueError("amount must be numeric")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(str(value).strip()) if isinstance(value, str) else Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"invalid amount: {value!r}") from e
    if not amount.is_finite():
        raise ValueError(f"invalid amount: {value!r}")
    return amount.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def parse_date(v: Any) -> date | None:
    """Parse YYYY-MM-DD, DD/MM/YYYY or an ISO timestamp; blank means None."""
    if v is None or isinstance(v, date) and not isinstance(v, datetime):
        return v
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, str):
        v = v.strip()
        if not v:
            return None
        for fmt in ("%Y-%m-%d", "%d/%m/%Y"):
            try:
                return datetime.strptime(v, fmt).date()
            except ValueError:
                continue
        # Accept full ISO timestamps as sent by some clients
        try:
            return datetime.fromisoformat(v.replace("Z", "+00:00")).date()
        except ValueError:
            pass
    raise ValueError(f"invalid date: {v!r}")


class Invoice(BaseModel):
    """Persisted invoice owned by a single user."""

    id: int | None = None
    usuario_id: int
    cliente_id: int | None = None
    fecha_emision: date
    importe: Decimal
    estado: bool = False
    numero: str | None = None
    descripcion: str | None = None
    archivo: str | None = None

    # Resolved on read
    cliente_nombre: str | None = None
    archivo_url: str | None = None

    @field_validator("importe", mode="before")
    @classmethod
    def coerce_importe(cls, v: Any) -> Decimal:
        return to_money(v)

    @field_validator("fecha_emision", mode="before")
    @classmethod
    def coerce_fecha(cls, v: Any) -> date:
        return parse_date(v)


class InvoiceDraft(BaseModel):
    """
    Input for invoice creation.

    Every field is optional here so that missing required values surface
    as a domain ValidationError from the service rather than a schema error.
    """

    cliente_id: int | None = None
    fecha_emision: date | None = None
    importe: Decimal | None = None
    estado: bool | None = None
    numero: str | None = None
    descripcion: str | None = None

    @field_validator("importe", mode="before")
    @classmethod
    def coerce_importe(cls, v: Any) -> Decimal | None:
        return None if v is None else to_money(v)

    @field_validator("fecha_emision", mode="before")
    @classmethod
    def coerce_fecha(cls, v: Any) -> date | None:
        return parse_date(v)

    def validate_required(self) -> None:
        """Raise ValidationError unless client, date, amount and status are present."""
        if (
            self.fecha_emision is None
            or self.importe is None
            or self.estado is None
            or not self.cliente_id
        ):
            missing = [
                name
                for name, value in (
                    ("fecha_emision", self.fecha_emision),
                    ("importe", self.importe),
                    ("estado", self.estado),
                    ("cliente_id", self.cliente_id or None),
                )
                if value is None
            ]
            raise ValidationError(
                field=",".join(missing),
                message="Issue date, amount, client and status are required",
            )

    def to_invoice(self, owner_id: int, archivo: str | None = None) -> Invoice:
        """Build the invoice to persist. Empty number/description store as NULL."""
        self.validate_required()
        return Invoice(
            usuario_id=owner_id,
            cliente_id=self.cliente_id,
            fecha_emision=self.fecha_emision,
            importe=self.importe,
            estado=self.estado,
            numero=self.numero or None,
            descripcion=self.descripcion or None,
            archivo=archivo,
        )


class UpdatePolicy(str, Enum):
    """How a partial-update field decides whether to overwrite."""

    IF_DEFINED = "if_defined"
    IF_TRUTHY = "if_truthy"


FIELD_POLICIES: dict[str, UpdatePolicy] = {
    "cliente_id": UpdatePolicy.IF_TRUTHY,
    "fecha_emision": UpdatePolicy.IF_TRUTHY,
    "importe": UpdatePolicy.IF_TRUTHY,
    "estado": UpdatePolicy.IF_DEFINED,
    "numero": UpdatePolicy.IF_DEFINED,
    "descripcion": UpdatePolicy.IF_DEFINED,
}


class InvoiceChanges(BaseModel):
    """
    Partial invoice update.

    A field counts as defined only when it was passed explicitly
    (``model_fields_set``). Defined values for status, number and
    description overwrite even when falsy; client, date and amount
    overwrite only when truthy, so a zero amount keeps the prior value.
    """

    cliente_id: int | None = None
    fecha_emision: date | None = None
    importe: Decimal | None = None
    estado: bool | None = None
    numero: str | None = None
    descripcion: str | None = None

    @field_validator("importe", mode="before")
    @classmethod
    def coerce_importe(cls, v: Any) -> Decimal | None:
        return None if v is None else to_money(v)

    @field_validator("fecha_emision", mode="before")
    @classmethod
    def coerce_fecha(cls, v: Any) -> date | None:
        return parse_date(v)

    @field_validator("numero", "descripcion")
    @classmethod
    def empty_to_none(cls, v: str | None) -> str | None:
        # Still counts as defined: clears the stored value
        return v or None

    def resolved(self) -> dict[str, Any]:
        """Return the field values that will overwrite the stored invoice."""
        updates: dict[str, Any] = {}
        for name, policy in FIELD_POLICIES.items():
            if name not in self.model_fields_set:
                continue
            value = getattr(self, name)
            if policy is UpdatePolicy.IF_TRUTHY and not value:
                continue
            updates[name] = value

        if "estado" in updates and updates["estado"] is None:
            raise ValidationError(field="estado", message="Status must be true or false")
        return updates

    def apply_to(self, invoice: Invoice) -> Invoice:
        """Return a copy of ``invoice`` with these changes applied."""
        return invoice.model_copy(update=self.resolved())


class SortOrder(str, Enum):
    """SQL sort direction."""

    ASC = "ASC"
    DESC = "DESC"


_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def leading_int(value: Any) -> int | None:
    """Integer at the start of a value (``"2024abc"`` gives 2024), or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def parse_positive_int(value: Any, default: int) -> int:
    """
    Parse a leading integer from a query value.

    Missing, non-numeric and non-positive values fall back to ``default``.
    """
    number = leading_int(value)
    return number if number is not None and number > 0 else default


def normalize_search(search: str | None) -> str:
    """Lowercase the search text and drop all whitespace."""
    if not search:
        return ""
    return re.sub(r"\s", "", search.lower().strip())


@dataclass
class InvoiceListParams:
    """Filter, sort and pagination parameters for listing a user's invoices."""

    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    sort_field: str = DEFAULT_SORT_FIELD
    sort_order: SortOrder = SortOrder.DESC
    search: str = ""

    def __post_init__(self) -> None:
        if self.sort_field not in SORTABLE_FIELDS:
            raise ValidationError(
                field="sortField",
                message=f"Cannot sort by '{self.sort_field}'",
                value=self.sort_field,
            )
        self.search = normalize_search(self.search)

    @classmethod
    def from_query(
        cls,
        page: str | int | None = None,
        limit: str | int | None = None,
        sort_field: str | None = None,
        sort_order: str | None = None,
        search: str | None = None,
    ) -> "InvoiceListParams":
        """Build params from raw query-string values."""
        ascending = (sort_order or "").strip().lower() in {"1", "asc"}
        return cls(
            page=parse_positive_int(page, 1),
            limit=parse_positive_int(limit, DEFAULT_PAGE_SIZE),
            sort_field=sort_field or DEFAULT_SORT_FIELD,
            sort_order=SortOrder.ASC if ascending else SortOrder.DESC,
            search=search or "",
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def search_pattern(self) -> str | None:
        """LIKE pattern for the search text, or None when not searching."""
        if not self.search:
            return None
        return f"%{self.search}%"


@dataclass
class InvoicePage:
    """One page of invoices plus the owner's overall invoice count."""

    invoices: list[Invoice] = field(default_factory=list)
    total: int = 0
