from __future__ import annotations

from collections.abc import Iterator
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from services.api.app.services.errors import TransientStoreError
from services.api.app.services.payment_base import CaptureResult, PaymentGatewayError
from services.api.app.services.payment_factory import get_payment_gateway
from sqlalchemy.exc import OperationalError


def test_get_payment_gateway_defaults_to_trusted(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FOODORDER_PAYMENT_GATEWAY", raising=False)
    gateway = get_payment_gateway()
    assert gateway.name == "TRUSTED"

    capture = gateway.capture(1, amount=Decimal("12.50"), method="CASH")
    assert capture.amount == Decimal("12.50")
    assert capture.method == "CASH"
    assert capture.reference_id.startswith("trusted_")


def test_get_payment_gateway_rejects_unknown(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FOODORDER_PAYMENT_GATEWAY", "nope")
    with pytest.raises(ValueError, match="Unknown FOODORDER_PAYMENT_GATEWAY"):
        get_payment_gateway()


class _RaisingGateway:
    name = "RAISING"

    def __init__(self, exc: Exception) -> None:
        self._exc = exc

    def capture(self, order_id: int, *, amount: Decimal, method: str | None) -> CaptureResult:
        del order_id, amount, method
        raise self._exc


@pytest.fixture()
def client(catalog) -> Iterator[TestClient]:
    del catalog
    from services.api.app.main import app

    with TestClient(app) as c:
        yield c


def _place(client: TestClient, catalog) -> int:
    return client.post(
        "/v1/orders",
        json={
            "customer_id": catalog.customer_id,
            "restaurant_id": catalog.restaurant_id,
            "address_id": catalog.address_id,
        },
    ).json()["order_id"]


@pytest.mark.parametrize(
    ("exc", "status"),
    [
        (PaymentGatewayError("gateway timeout"), 502),
        (TransientStoreError("record_payment", OperationalError("x", {}, Exception("x"))), 503),
    ],
)
def test_payment_route_maps_gateway_errors(
    client: TestClient,
    catalog,
    monkeypatch: pytest.MonkeyPatch,
    exc: Exception,
    status: int,
) -> None:
    import services.api.app.routers.order as order_router

    order_id = _place(client, catalog)
    monkeypatch.setattr(order_router, "get_payment_gateway", lambda: _RaisingGateway(exc))

    resp = client.post(f"/v1/orders/{order_id}/payments", json={"amount": "5.00"})
    assert resp.status_code == status
    assert "detail" in resp.json()

    order = client.get(f"/v1/orders/{order_id}").json()
    assert order["payment_status"] == "UNPAID"


def test_payment_route_unknown_error_is_500(
    client: TestClient, catalog, monkeypatch: pytest.MonkeyPatch
) -> None:
    import services.api.app.routers.order as order_router

    order_id = _place(client, catalog)
    monkeypatch.setattr(
        order_router, "get_payment_gateway", lambda: _RaisingGateway(Exception("x"))
    )

    resp = client.post(f"/v1/orders/{order_id}/payments", json={"amount": "5.00"})
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Internal Server Error"
