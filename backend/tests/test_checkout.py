"""
Tests for checkout records and the health endpoint.

Tests: POST /api/checkout, GET /api/checkout/{id}, GET /health.
"""
import pytest


class TestCreateCheckout:

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_new_checkout_starts_unpaid(self, client, sample_user, user_headers):
        response = await client.post("/api/checkout", json={"totalAmount": 250_000}, headers=user_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "UNPAID"
        assert data["totalAmount"] == 250_000
        assert data["userId"] == sample_user.id

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_negative_amount_rejected(self, client, user_headers):
        response = await client.post("/api/checkout", json={"totalAmount": -1}, headers=user_headers)
        assert response.status_code == 422

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_requires_login(self, client):
        response = await client.post("/api/checkout", json={"totalAmount": 1})
        assert response.status_code == 401


class TestGetCheckout:

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_owner_can_read(self, client, sample_checkout, user_headers):
        response = await client.get(f"/api/checkout/{sample_checkout.id}", headers=user_headers)
        assert response.status_code == 200
        assert response.json()["id"] == sample_checkout.id

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_other_user_is_403(self, client, sample_checkout, other_user, test_settings):
        from tests.conftest import bearer

        response = await client.get(
            f"/api/checkout/{sample_checkout.id}", headers=bearer(other_user, test_settings)
        )
        assert response.status_code == 403

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_admin_can_read_any(self, client, sample_checkout, admin_headers):
        response = await client.get(f"/api/checkout/{sample_checkout.id}", headers=admin_headers)
        assert response.status_code == 200

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_unknown_is_404(self, client, user_headers):
        response = await client.get("/api/checkout/missing", headers=user_headers)
        assert response.status_code == 404
        assert response.json()["success"] is False


class TestHealth:

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_healthy(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database_connected"] is True
        assert data["environment"] == "test"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_unknown_route_uses_error_envelope(self, client):
        response = await client.get("/api/does-not-exist")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "http_error"
