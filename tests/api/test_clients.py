"""Tests for client endpoints."""

from unittest.mock import AsyncMock

import pytest

from facturacion.api.dependencies import get_cli_store
from facturacion.api.main import app
from facturacion.core.entities import Client
from facturacion.core.exceptions import DuplicateClientEmailError
from facturacion.core.interfaces import IClientStore


@pytest.fixture
def client_store():
    store = AsyncMock(spec=IClientStore)

    async def create(client):
        return client.model_copy(update={"id": 3})

    async def update(client):
        return client

    store.create_client.side_effect = create
    store.update_client.side_effect = update
    return store


@pytest.fixture
def acme() -> Client:
    return Client(id=3, usuario_id=1, nombre="Acme SL", email="billing@acme.es", telefono="600000000")


@pytest.fixture
def wired(api_client, client_store):
    app.dependency_overrides[get_cli_store] = lambda: client_store
    return api_client


class TestCreateClient:
    async def test_create(self, wired, client_store):
        response = await wired.post(
            "/api/clients", json={"nombre": "Acme SL", "email": "billing@acme.es", "telefono": ""}
        )

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Client created successfully"
        assert data["cliente"]["id"] == 3
        assert data["cliente"]["usuario_id"] == 1
        assert data["cliente"]["telefono"] is None

    async def test_name_required(self, wired, client_store):
        response = await wired.post("/api/clients", json={"email": "a@b.es"})

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"
        client_store.create_client.assert_not_awaited()

    async def test_duplicate_email(self, wired, client_store):
        client_store.create_client.side_effect = DuplicateClientEmailError("billing@acme.es")

        response = await wired.post("/api/clients", json={"nombre": "Acme", "email": "billing@acme.es"})

        assert response.status_code == 400
        assert response.json()["error_code"] == "DUPLICATE_CLIENT_EMAIL"


class TestListClients:
    async def test_list(self, wired, client_store, acme):
        client_store.list_clients.return_value = [acme]
        client_store.count_clients.return_value = 21

        response = await wired.get("/api/clients", params={"page": "3"})

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 21
        assert data["totalPages"] == 3
        assert data["clientes"][0]["nombre"] == "Acme SL"
        client_store.list_clients.assert_awaited_once_with(1, limit=10, offset=20)

    async def test_list_custom_limit(self, wired, client_store):
        client_store.list_clients.return_value = []
        client_store.count_clients.return_value = 0

        response = await wired.get("/api/clients", params={"limit": "4", "page": "zero"})

        assert response.json()["totalPages"] == 0
        client_store.list_clients.assert_awaited_once_with(1, limit=4, offset=0)


class TestSingleClient:
    async def test_get(self, wired, client_store, acme):
        client_store.get_client.return_value = acme

        response = await wired.get("/api/clients/3")

        assert response.status_code == 200
        assert response.json()["cliente"]["email"] == "billing@acme.es"
        client_store.get_client.assert_awaited_once_with(1, 3)

    async def test_get_not_found(self, wired, client_store):
        client_store.get_client.return_value = None

        response = await wired.get("/api/clients/3")

        assert response.status_code == 404
        assert response.json()["error_code"] == "CLIENT_NOT_FOUND"

    async def test_update_keeps_empty_fields(self, wired, client_store, acme):
        client_store.get_client.return_value = acme

        response = await wired.put("/api/clients/3", json={"nombre": "Acme Group", "email": ""})

        assert response.status_code == 200
        cliente = response.json()["cliente"]
        assert cliente["nombre"] == "Acme Group"
        assert cliente["email"] == "billing@acme.es"
        assert cliente["telefono"] == "600000000"

    async def test_update_not_found(self, wired, client_store):
        client_store.get_client.return_value = None

        response = await wired.put("/api/clients/3", json={"nombre": "X"})

        assert response.status_code == 404
        client_store.update_client.assert_not_awaited()

    async def test_delete(self, wired, client_store):
        client_store.delete_client.return_value = True

        response = await wired.delete("/api/clients/3")

        assert response.status_code == 200
        assert response.json() == {"message": "Client deleted successfully"}
        client_store.delete_client.assert_awaited_once_with(1, 3)

    async def test_delete_not_found(self, wired, client_store):
        client_store.delete_client.return_value = False

        response = await wired.delete("/api/clients/3")

        assert response.status_code == 404
