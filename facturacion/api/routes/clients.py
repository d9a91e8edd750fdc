"""
Client management endpoints.
"""

import math

from fastapi import APIRouter, Depends, Query, status

from facturacion.api.auth import get_current_user
from facturacion.api.dependencies import get_cli_store
from facturacion.application.dto.requests import CreateClientRequest, UpdateClientRequest
from facturacion.application.dto.responses import (
    ClientDetailResponse,
    ClientListResponse,
    ClientMutationResponse,
    ClientResponse,
    ErrorResponse,
    MessageResponse,
)
from facturacion.core.entities import (
    DEFAULT_CLIENT_PAGE_SIZE,
    AuthenticatedUser,
    Client,
    ClientChanges,
)
from facturacion.core.entities.invoice import parse_positive_int
from facturacion.core.exceptions import ClientNotFoundError
from facturacion.infrastructure.storage.sqlite import SQLiteClientStore

router = APIRouter(prefix="/api/clients", tags=["clients"])


@router.post(
    "",
    response_model=ClientMutationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_client(
    request: CreateClientRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    store: SQLiteClientStore = Depends(get_cli_store),
) -> ClientMutationResponse:
    """Create a client owned by the current user."""
    client = Client(
        usuario_id=user.id,
        nombre=request.nombre,
        email=request.email,
        telefono=request.telefono,
        direccion_fiscal=request.direccion_fiscal,
    )
    created = await store.create_client(client)
    return ClientMutationResponse(
        message="Client created successfully",
        cliente=ClientResponse.from_entity(created),
    )


@router.get(
    "",
    response_model=ClientListResponse,
)
async def list_clients(
    page: str | None = Query(default=None),
    limit: str | None = Query(default=None),
    user: AuthenticatedUser = Depends(get_current_user),
    store: SQLiteClientStore = Depends(get_cli_store),
) -> ClientListResponse:
    """List the user's clients ordered by name."""
    page_number = parse_positive_int(page, 1)
    page_size = parse_positive_int(limit, DEFAULT_CLIENT_PAGE_SIZE)

    clients = await store.list_clients(
        user.id,
        limit=page_size,
        offset=(page_number - 1) * page_size,
    )
    total = await store.count_clients(user.id)

    return ClientListResponse(
        clientes=[ClientResponse.from_entity(c) for c in clients],
        total=total,
        total_pages=math.ceil(total / page_size),
    )


@router.get(
    "/{client_id}",
    response_model=ClientDetailResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_client(
    client_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    store: SQLiteClientStore = Depends(get_cli_store),
) -> ClientDetailResponse:
    """Get one client."""
    client = await store.get_client(user.id, client_id)
    if client is None:
        raise ClientNotFoundError(client_id)
    return ClientDetailResponse(cliente=ClientResponse.from_entity(client))


@router.put(
    "/{client_id}",
    response_model=ClientMutationResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_client(
    client_id: int,
    request: UpdateClientRequest,
    user: AuthenticatedUser = Depends(get_current_user),
    store: SQLiteClientStore = Depends(get_cli_store),
) -> ClientMutationResponse:
    """Update a client. Empty or missing values keep the stored value."""
    existing = await store.get_client(user.id, client_id)
    if existing is None:
        raise ClientNotFoundError(client_id)

    changes = ClientChanges(**request.model_dump())
    updated = await store.update_client(changes.apply_to(existing))
    if updated is None:
        raise ClientNotFoundError(client_id)

    return ClientMutationResponse(
        message="Client updated successfully",
        cliente=ClientResponse.from_entity(updated),
    )


@router.delete(
    "/{client_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
async def delete_client(
    client_id: int,
    user: AuthenticatedUser = Depends(get_current_user),
    store: SQLiteClientStore = Depends(get_cli_store),
) -> MessageResponse:
    """Delete a client. Its invoices are kept without a client."""
    if not await store.delete_client(user.id, client_id):
        raise ClientNotFoundError(client_id)
    return MessageResponse(message="Client deleted successfully")
