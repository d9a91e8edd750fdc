"""
Invoice endpoints.

Create and update take multipart forms with an optional ``archivo`` file
part. Every route is scoped to the authenticated user.
"""

from typing import Any

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile, status

from facturacion.api.auth import get_current_user
from facturacion.api.dependencies import get_app_settings, get_invoices, get_reporting
from facturacion.application.dto.responses import (
    ErrorResponse,
    InvoiceDetailResponse,
    InvoiceListResponse,
    InvoiceMutationResponse,
    InvoiceResponse,
    MessageResponse,
    YearlySummaryResponse,
)
from facturacion.config import Settings
from facturacion.core.entities import (
    AttachmentUpload,
    AuthenticatedUser,
    InvoiceChanges,
    InvoiceDraft,
    InvoiceListParams,
    parse_date,
    to_money,
)
from facturacion.core.exceptions import (
    EmptyFileError,
    FileTooLargeError,
    UnsupportedFileTypeError,
    ValidationError,
)
from facturacion.core.services import InvoiceReportingService, InvoiceService

router = APIRouter(prefix="/api/invoices", tags=["invoices"])

INVOICE_FORM_FIELDS = (
    "cliente_id",
    "fecha_emision",
    "importe",
    "estado",
    "numero",
    "descripcion",
)

TRUE_VALUES = frozenset({"true", "1", "on", "yes"})
FALSE_VALUES = frozenset({"false", "0", "off", "no"})

COMMON_ERRORS: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    401: {"model": ErrorResponse, "description": "Missing credentials"},
}


# Form parsing


def _parse_bool(field: str, raw: str) -> bool | None:
    value = raw.strip().lower()
    if not value:
        return None
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ValidationError(field=field, message="Status must be true or false", value=raw)


def _parse_int(field: str, raw: str) -> int | None:
    value = raw.strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ValidationError(field=field, message=f"Invalid {field}", value=raw)


def _parse_amount(raw: str) -> Any:
    value = raw.strip()
    if not value:
        return None
    try:
        return to_money(value)
    except ValueError:
        raise ValidationError(field="importe", message="Invalid amount", value=raw)


def _parse_date(raw: str) -> Any:
    try:
        return parse_date(raw)
    except ValueError:
        raise ValidationError(field="fecha_emision", message="Invalid issue date", value=raw)


def parse_invoice_form(
    cliente_id: str | None,
    fecha_emision: str | None,
    importe: str | None,
    estado: str | None,
    numero: str | None,
    descripcion: str | None,
) -> dict[str, Any]:
    """
    Convert raw form values to typed invoice fields.

    Only fields present in the form appear in the result, so callers can
    tell an omitted field from one sent empty.
    """
    fields: dict[str, Any] = {}
    if cliente_id is not None:
        fields["cliente_id"] = _parse_int("cliente_id", cliente_id)
    if fecha_emision is not None:
        fields["fecha_emision"] = _parse_date(fecha_emision)
    if importe is not None:
        fields["importe"] = _parse_amount(importe)
    if estado is not None:
        fields["estado"] = _parse_bool("estado", estado)
    if numero is not None:
        fields["numero"] = numero.strip()
    if descripcion is not None:
        fields["descripcion"] = descripcion
    return fields


async def invoice_form(request: Request) -> dict[str, Any]:
    """
    Typed invoice fields from the form body.

    Read from the raw form so that fields sent empty stay distinguishable
    from omitted ones.
    """
    form = await request.form()
    raw = {}
    for name in INVOICE_FORM_FIELDS:
        value = form.get(name)
        raw[name] = value if isinstance(value, str) else None
    return parse_invoice_form(**raw)


async def read_attachment(
    upload: UploadFile | None, settings: Settings
) -> AttachmentUpload | None:
    """Validate and read the uploaded attachment, if any."""
    if upload is None or not upload.filename:
        return None

    attachment = AttachmentUpload(
        filename=upload.filename,
        content=b"",
        content_type=upload.content_type,
    )
    allowed = settings.uploads.allowed_extensions
    if attachment.extension not in allowed:
        raise UnsupportedFileTypeError(upload.filename, attachment.extension, allowed)

    attachment.content = await upload.read()
    if attachment.size == 0:
        raise EmptyFileError(upload.filename)
    if attachment.size > settings.uploads.max_size:
        raise FileTooLargeError(upload.filename, attachment.size, settings.uploads.max_size)
    return attachment


# Routes


@router.post(
    "",
    response_model=InvoiceMutationResponse,
    status_code=status.HTTP_201_CREATED,
    responses=COMMON_ERRORS,
)
async def create_invoice(
    user: AuthenticatedUser = Depends(get_current_user),
    fields: dict[str, Any] = Depends(invoice_form),
    archivo: UploadFile | None = File(default=None),
    service: InvoiceService = Depends(get_invoices),
    settings: Settings = Depends(get_app_settings),
) -> InvoiceMutationResponse:
    """Create an invoice with an optional attachment."""
    attachment = await read_attachment(archivo, settings)

    invoice = await service.create(user.id, InvoiceDraft(**fields), attachment)
    return InvoiceMutationResponse(
        message="Invoice created successfully",
        factura=InvoiceResponse.from_entity(invoice),
    )


@router.get(
    "",
    response_model=InvoiceListResponse,
    responses=COMMON_ERRORS,
)
async def list_invoices(
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    sort_field: str | None = Query(default=None, alias="sortField"),
    sort_order: str | None = Query(default=None, alias="sortOrder"),
    search: str | None = Query(default=None),
    user: AuthenticatedUser = Depends(get_current_user),
    service: InvoiceService = Depends(get_invoices),
) -> InvoiceListResponse:
    """Search, sort and paginate the user's invoices."""
    params = InvoiceListParams.from_query(
        page=page,
        limit=limit,
        sort_field=sort_field,
        sort_order=sort_order,
        search=search,
    )
    result = await service.list_invoices(user.id, params)
    return InvoiceListResponse(
        facturas=[InvoiceResponse.from_entity(i) for i in result.invoices],
        total=result.total,
    )


@router.get(
    "/summary",
    response_model=YearlySummaryResponse,
    responses=COMMON_ERRORS,
)
async def invoice_summary(
    year: str | None = Query(default=None),
    user: AuthenticatedUser = Depends(get_current_user),
    reporting: InvoiceReportingService = Depends(get_reporting),
) -> YearlySummaryResponse:
    """Yearly totals, averages and monthly breakdown."""
    summary = await reporting.yearly_summary(user.id, year)
    return YearlySummaryResponse.from_entity(summary)


@router.get(
    "/{invoice_id}",
    response_model=InvoiceDetailResponse,
    responses={**COMMON_ERRORS, 404: {"model": ErrorResponse}},
)
async def get_invoice(
    invoice_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    service: InvoiceService = Depends(get_invoices),
) -> InvoiceDetailResponse:
    """Get one invoice."""
    invoice = await service.get(user.id, invoice_id)
    return InvoiceDetailResponse(factura=InvoiceResponse.from_entity(invoice))


@router.put(
    "/{invoice_id}",
    response_model=InvoiceMutationResponse,
    responses={**COMMON_ERRORS, 404: {"model": ErrorResponse}},
)
async def update_invoice(
    invoice_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    fields: dict[str, Any] = Depends(invoice_form),
    archivo: UploadFile | None = File(default=None),
    service: InvoiceService = Depends(get_invoices),
    settings: Settings = Depends(get_app_settings),
) -> InvoiceMutationResponse:
    """
    Partially update an invoice.

    Omitted fields keep their value. Status, number and description are
    overwritten whenever sent; client, date and amount only when non-empty
    and non-zero.
    """
    attachment = await read_attachment(archivo, settings)

    invoice = await service.update(user.id, invoice_id, InvoiceChanges(**fields), attachment)
    return InvoiceMutationResponse(
        message="Invoice updated successfully",
        factura=InvoiceResponse.from_entity(invoice),
    )


@router.delete(
    "/{invoice_id}",
    response_model=MessageResponse,
    responses={**COMMON_ERRORS, 404: {"model": ErrorResponse}},
)
async def delete_invoice(
    invoice_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    service: InvoiceService = Depends(get_invoices),
) -> MessageResponse:
    """Delete an invoice and its attachment."""
    await service.delete(user.id, invoice_id)
    return MessageResponse(message="Invoice deleted successfully")


@router.delete(
    "/{invoice_id}/attachment",
    response_model=MessageResponse,
    responses={
        **COMMON_ERRORS,
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse, "description": "File could not be removed"},
    },
)
async def delete_invoice_attachment(
    invoice_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    service: InvoiceService = Depends(get_invoices),
) -> MessageResponse:
    """Remove only the attachment of an invoice."""
    await service.clear_attachment(user.id, invoice_id)
    return MessageResponse(message="Attachment deleted successfully")
