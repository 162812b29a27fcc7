"""
HTTP tests for /api/v1/sales-transactions.

Covers the wire contract: bearer auth, camelCase JSON with plain numbers,
the { data } / { data, meta } envelopes and the { error: { code } } bodies.
"""

from __future__ import annotations

import httpx
import pytest
from fastapi import Depends

from app.db.base import get_db
from app.routers.v1.sales_transactions import get_sales_service
from app.services.sales_transaction import SalesTransactionService

BASE = "/api/v1/sales-transactions"


def _body(vehicle_id: str, **overrides) -> dict:
    body = {
        "vehicleId": vehicle_id,
        "customerName": "Morgan Blake",
        "customerEmail": "morgan.blake@northside-motors.ca",
        "grossPrice": 1000.00,
        "discount": 100.00,
        "taxRate": 0.13,
        "paymentMethod": "finance",
    }
    body.update(overrides)
    return body


async def _create(client: httpx.AsyncClient, vehicle_id: str, **overrides) -> dict:
    response = await client.post(BASE, json=_body(vehicle_id, **overrides))
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def test_health(client) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_requests_without_token_are_rejected(app) -> None:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as anonymous:
        response = await anonymous.get(BASE)

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


async def test_unknown_token_is_rejected(client) -> None:
    response = await client.get(BASE, headers={"Authorization": "Bearer nope"})

    assert response.status_code == 401


async def test_create_returns_camel_case_numbers(client, make_vehicle) -> None:
    vehicle = await make_vehicle(acquisition_cost="600.00")

    data = await _create(client, vehicle.id)

    assert data["status"] == "pending"
    assert data["vehicleId"] == vehicle.id
    assert data["salePrice"] == 900.0
    assert data["taxAmount"] == 117.0
    assert data["totalPrice"] == 1017.0
    assert data["costOfGoods"] == 600.0
    assert data["margin"] == 300.0
    assert data["marginPercent"] == pytest.approx(0.333333)
    assert data["salespersonId"] == "rep-1"
    assert data["closedAt"] is None


async def test_legacy_sale_price_is_read_as_gross(client, make_vehicle) -> None:
    vehicle = await make_vehicle()
    body = _body(vehicle.id, salePrice=1000.00)
    del body["grossPrice"]

    response = await client.post(BASE, json=body)

    assert response.status_code == 201
    assert response.json()["data"]["grossPrice"] == 1000.0
    assert response.json()["data"]["salePrice"] == 900.0


async def test_sending_both_prices_is_rejected(client, make_vehicle) -> None:
    vehicle = await make_vehicle()

    response = await client.post(BASE, json=_body(vehicle.id, salePrice=900.00))

    assert response.status_code == 422


async def test_discount_above_gross_is_invalid_financial_input(client, make_vehicle) -> None:
    vehicle = await make_vehicle()

    response = await client.post(BASE, json=_body(vehicle.id, discount=1500))

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "INVALID_FINANCIAL_INPUT"


async def test_tax_rate_finer_than_five_places_is_invalid_financial_input(client, make_vehicle) -> None:
    vehicle = await make_vehicle()

    response = await client.post(BASE, json=_body(vehicle.id, grossPrice=1000000, taxRate=0.1234567))

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "INVALID_FINANCIAL_INPUT"


async def test_create_for_unknown_vehicle_is_404(client, statuses) -> None:
    response = await client.post(BASE, json=_body("missing-vehicle"))

    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


async def test_patch_recomputes_and_complete_closes(client, make_vehicle) -> None:
    vehicle = await make_vehicle(status="reserved")
    created = await _create(client, vehicle.id)

    response = await client.patch(f"{BASE}/{created['id']}", json={"discount": 0})
    assert response.status_code == 200
    assert response.json()["data"]["totalPrice"] == 1130.0

    response = await client.post(f"{BASE}/{created['id']}/complete")
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "completed"
    assert response.json()["data"]["closedAt"] is not None

    response = await client.get(f"{BASE}/{created['id']}")
    assert response.json()["data"]["status"] == "completed"


async def test_patch_on_closed_transaction_conflicts(client, make_vehicle) -> None:
    vehicle = await make_vehicle()
    created = await _create(client, vehicle.id)
    await client.post(f"{BASE}/{created['id']}/cancel")

    response = await client.patch(f"{BASE}/{created['id']}", json={"notes": "reopen?"})

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "INVALID_STATE_TRANSITION"


async def test_cancel_twice_conflicts(client, make_vehicle) -> None:
    vehicle = await make_vehicle(status="reserved")
    created = await _create(client, vehicle.id)

    first = await client.post(f"{BASE}/{created['id']}/cancel")
    second = await client.post(f"{BASE}/{created['id']}/cancel")

    assert first.status_code == 200
    assert second.status_code == 409


async def test_status_in_patch_body_is_ignored(client, make_vehicle) -> None:
    vehicle = await make_vehicle()
    created = await _create(client, vehicle.id)

    response = await client.patch(f"{BASE}/{created['id']}", json={"status": "completed"})

    # status is not an update field
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "pending"


async def test_list_paginates_and_filters(client, make_vehicle) -> None:
    vehicle = await make_vehicle()
    for name in ("Ava Stone", "Ben Ortiz", "Cleo Park"):
        await _create(client, vehicle.id, customerName=name)

    response = await client.get(BASE, params={"limit": 2})
    payload = response.json()
    assert response.status_code == 200
    assert len(payload["data"]) == 2
    assert payload["meta"] == {"total": 3, "page": 1, "limit": 2, "pages": 2}

    response = await client.get(BASE, params={"search": "ortiz"})
    assert [tx["customerName"] for tx in response.json()["data"]] == ["Ben Ortiz"]

    response = await client.get(BASE, params={"status": "completed"})
    assert response.json()["meta"]["total"] == 0


async def test_list_rejects_oversized_page(client) -> None:
    response = await client.get(BASE, params={"limit": 101})

    assert response.status_code == 422


async def test_summary(client, make_vehicle) -> None:
    vehicle = await make_vehicle()
    created = await _create(client, vehicle.id)
    await _create(client, vehicle.id)
    await client.post(f"{BASE}/{created['id']}/complete")

    response = await client.get(f"{BASE}/summary")

    assert response.status_code == 200
    rows = {row["status"]: row for row in response.json()["data"]}
    assert rows["completed"]["count"] == 1
    assert rows["completed"]["totalRevenue"] == 1017.0
    assert rows["pending"]["count"] == 1


async def test_delete(client, make_vehicle) -> None:
    vehicle = await make_vehicle()
    created = await _create(client, vehicle.id)

    response = await client.delete(f"{BASE}/{created['id']}")
    assert response.status_code == 204

    response = await client.get(f"{BASE}/{created['id']}")
    assert response.status_code == 404


async def test_downstream_failure_is_502_with_details(app, client, make_vehicle) -> None:
    class _Offline:
        async def on_completed(self, transaction):
            raise RuntimeError("inventory offline")

        async def on_cancelled(self, transaction):
            raise RuntimeError("inventory offline")

    def _service(session=Depends(get_db)) -> SalesTransactionService:
        return SalesTransactionService(session, coordinator=_Offline())

    vehicle = await make_vehicle(status="reserved")
    created = await _create(client, vehicle.id)
    app.dependency_overrides[get_sales_service] = _service

    response = await client.post(f"{BASE}/{created['id']}/complete")

    assert response.status_code == 502
    error = response.json()["error"]
    assert error["code"] == "DOWNSTREAM_EFFECT_FAILED"
    assert error["details"] == {"transactionId": created["id"], "status": "completed"}

    response = await client.get(f"{BASE}/{created['id']}")
    assert response.json()["data"]["status"] == "completed"
