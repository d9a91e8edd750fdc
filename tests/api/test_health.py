"""Tests for health endpoints."""

from facturacion import __version__
from facturacion.infrastructure.storage.sqlite import close_pool


async def test_health(api_client):
    response = await api_client.get("/api/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["version"] == __version__
    assert data["uptime_seconds"] >= 0


async def test_root_health(api_client):
    response = await api_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": __version__}


async def test_db_health(api_client):
    try:
        response = await api_client.get("/api/health/db")
    finally:
        await close_pool()

    assert response.status_code == 200
    data = response.json()
    assert data["database"]["name"] == "sqlite"
    assert data["database"]["available"] is True
    assert data["database"]["detail"] == "schema not migrated"


async def test_request_id_header(api_client):
    response = await api_client.get("/health", headers={"X-Request-ID": "abc123"})

    assert response.headers["X-Request-ID"] == "abc123"
    assert "X-Response-Time" in response.headers


async def test_unknown_route(api_client):
    response = await api_client.get("/api/nothing-here")

    assert response.status_code == 404
    assert response.json()["error_code"] == "NOT_FOUND"


async def test_uploads_health(api_client, tmp_path):
    (tmp_path / "uploads").mkdir()

    response = await api_client.get("/api/health/uploads")

    data = response.json()
    assert data["status"] == "healthy"
    assert data["uploads"]["available"] is True


async def test_uploads_health_missing_dir(api_client):
    response = await api_client.get("/api/health/uploads")

    data = response.json()
    assert response.status_code == 200
    assert data["status"] == "unhealthy"
    assert "missing" in data["uploads"]["error"]
