"""
Tests for the Xendit payment webhook.

Tests: POST /api/xendit/webhook — callback token check, SETTLED → PAID,
everything else → UNPAID, method gate, unknown checkout, replay.
"""
import pytest

from tests.conftest import WEBHOOK_TOKEN
from db_models import Checkout

WEBHOOK_URL = "/api/xendit/webhook"


def _headers(token: str = WEBHOOK_TOKEN) -> dict:
    return {"X-Callback-Token": token}


async def _status_of(db_session, checkout_id: str) -> str:
    checkout = await db_session.get(Checkout, checkout_id)
    await db_session.refresh(checkout)
    return checkout.status


class TestWebhookStatusMapping:
    """Valid token: provider status mapped onto the checkout."""

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_settled_marks_checkout_paid(self, client, db_session, sample_checkout):
        response = await client.post(
            WEBHOOK_URL,
            json={"external_id": sample_checkout.id, "status": "SETTLED"},
            headers=_headers(),
        )
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Payment status updated"
        assert data["checkout"]["id"] == sample_checkout.id
        assert data["checkout"]["status"] == "PAID"
        assert await _status_of(db_session, sample_checkout.id) == "PAID"

    @pytest.mark.api
    @pytest.mark.asyncio
    @pytest.mark.parametrize("provider_status", ["FAILED", "PENDING", "EXPIRED", "PAID", "settled"])
    async def test_other_statuses_mark_checkout_unpaid(
        self, client, db_session, sample_checkout, provider_status
    ):
        """Only the exact literal SETTLED counts as paid."""
        sample_checkout.status = "PAID"
        await db_session.commit()

        response = await client.post(
            WEBHOOK_URL,
            json={"external_id": sample_checkout.id, "status": provider_status},
            headers=_headers(),
        )
        assert response.status_code == 200
        assert response.json()["checkout"]["status"] == "UNPAID"
        assert await _status_of(db_session, sample_checkout.id) == "UNPAID"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_missing_status_maps_to_unpaid(self, client, sample_checkout):
        response = await client.post(
            WEBHOOK_URL,
            json={"external_id": sample_checkout.id},
            headers=_headers(),
        )
        assert response.status_code == 200
        assert response.json()["checkout"]["status"] == "UNPAID"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_extra_provider_fields_ignored(self, client, sample_checkout):
        response = await client.post(
            WEBHOOK_URL,
            json={
                "id": "579c8d61f23fa4ca35e52da4",
                "external_id": sample_checkout.id,
                "status": "SETTLED",
                "amount": 150000,
                "payment_method": "BANK_TRANSFER",
            },
            headers=_headers(),
        )
        assert response.status_code == 200
        assert response.json()["checkout"]["status"] == "PAID"


class TestWebhookAuthentication:
    """Invalid or missing token: 401 and no mutation."""

    @pytest.mark.api
    @pytest.mark.asyncio
    @pytest.mark.parametrize("headers", [{}, _headers("wrong-token"), _headers(WEBHOOK_TOKEN + "x"), _headers("")])
    async def test_bad_token_rejected_without_mutation(self, client, db_session, sample_checkout, headers):
        response = await client.post(
            WEBHOOK_URL,
            json={"external_id": sample_checkout.id, "status": "SETTLED"},
            headers=headers,
        )
        assert response.status_code == 401
        assert response.json()["success"] is False
        assert await _status_of(db_session, sample_checkout.id) == "UNPAID"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_bad_token_rejected_even_with_garbage_body(self, client):
        response = await client.post(
            WEBHOOK_URL,
            content=b"not json at all",
            headers={**_headers("nope"), "Content-Type": "application/json"},
        )
        assert response.status_code == 401

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_unconfigured_token_fails_closed(self, app, client, db_session, sample_checkout):
        app.state.settings = app.state.settings.model_copy(update={"xendit_webhook_token": ""})
        response = await client.post(
            WEBHOOK_URL,
            json={"external_id": sample_checkout.id, "status": "SETTLED"},
            headers=_headers(""),
        )
        assert response.status_code == 401
        assert await _status_of(db_session, sample_checkout.id) == "UNPAID"


class TestWebhookMethodGate:

    @pytest.mark.api
    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["GET", "PUT", "PATCH", "DELETE"])
    async def test_non_post_is_405(self, app, client, db_session, sample_checkout, method):
        """The router answers 405 before the session dependency is resolved."""
        from database import get_db

        def _fail_if_called():
            raise AssertionError("store accessed on a non-POST request")

        app.dependency_overrides[get_db] = _fail_if_called

        response = await client.request(method, WEBHOOK_URL, headers=_headers())
        assert response.status_code == 405
        assert await _status_of(db_session, sample_checkout.id) == "UNPAID"


class TestWebhookFailures:

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_unknown_external_id_is_server_error(self, client, db_session, sample_checkout, second_checkout):
        response = await client.post(
            WEBHOOK_URL,
            json={"external_id": "does-not-exist", "status": "SETTLED"},
            headers=_headers(),
        )
        assert response.status_code == 500
        body = response.json()
        assert "error" in body
        assert body["error"]["message"] == "Record to update not found."
        assert await _status_of(db_session, sample_checkout.id) == "UNPAID"
        assert await _status_of(db_session, second_checkout.id) == "UNPAID"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_missing_external_id_is_server_error(self, client):
        response = await client.post(WEBHOOK_URL, json={"status": "SETTLED"}, headers=_headers())
        assert response.status_code == 500

    @pytest.mark.api
    @pytest.mark.asyncio
    @pytest.mark.parametrize("external_id", [12345, ["a"], {"id": "x"}, True])
    async def test_non_string_external_id_is_server_error(
        self, client, db_session, sample_checkout, external_id
    ):
        response = await client.post(
            WEBHOOK_URL,
            json={"external_id": external_id, "status": "SETTLED"},
            headers=_headers(),
        )
        assert response.status_code == 500
        assert response.json()["error"]["message"] == "Record to update not found."
        assert await _status_of(db_session, sample_checkout.id) == "UNPAID"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_non_string_status_maps_to_unpaid(self, client, sample_checkout):
        response = await client.post(
            WEBHOOK_URL,
            json={"external_id": sample_checkout.id, "status": 1},
            headers=_headers(),
        )
        assert response.status_code == 200
        assert response.json()["checkout"]["status"] == "UNPAID"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_invalid_json_after_auth_is_400(self, client):
        response = await client.post(
            WEBHOOK_URL,
            content=b"{broken",
            headers={**_headers(), "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Invalid JSON payload"


class TestWebhookReplay:

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_duplicate_settled_is_idempotent(self, client, db_session, sample_checkout):
        payload = {"external_id": sample_checkout.id, "status": "SETTLED"}
        first = await client.post(WEBHOOK_URL, json=payload, headers=_headers())
        second = await client.post(WEBHOOK_URL, json=payload, headers=_headers())

        assert first.status_code == second.status_code == 200
        assert first.json()["checkout"]["status"] == second.json()["checkout"]["status"] == "PAID"
        assert await _status_of(db_session, sample_checkout.id) == "PAID"

    @pytest.mark.api
    @pytest.mark.asyncio
    async def test_late_non_settled_delivery_reverts_paid(self, client, db_session, sample_checkout):
        """No ordering protection: the last delivery wins."""
        await client.post(
            WEBHOOK_URL, json={"external_id": sample_checkout.id, "status": "SETTLED"}, headers=_headers()
        )
        await client.post(
            WEBHOOK_URL, json={"external_id": sample_checkout.id, "status": "PENDING"}, headers=_headers()
        )
        assert await _status_of(db_session, sample_checkout.id) == "UNPAID"
