"""
Integration tests for the checkout HTTP endpoint.
"""
import pytest
from fastapi.testclient import TestClient

from conftest import FIXED_NOW, RecordingNotifier, StubGateway
from main import app
from modules.payment.gateways import Failed
from modules.payment.gateways.vnpay import VNPayGateway
from modules.payment.models import PaymentMethod
from modules.payment.registry import GatewayRegistry
from modules.payment.routes import get_checkout_service
from modules.payment.service import CheckoutService


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def client(vnpay_config, notifier):
    registry = GatewayRegistry([
        StubGateway(PaymentMethod.CARD),
        StubGateway(PaymentMethod.SIGNED_JSON, outcome=Failed(reason="transport error")),
        VNPayGateway(vnpay_config, clock=lambda: FIXED_NOW),
    ])
    service = CheckoutService(registry, notifier=notifier, notify_on_redirect=False)
    app.dependency_overrides[get_checkout_service] = lambda: service
    # No context manager: lifespan would build the real registry
    yield TestClient(app)
    app.dependency_overrides.clear()


def _body(**overrides):
    data = {
        "paymentMethod": "card",
        "orderId": "12345",
        "userEmail": "buyer@example.com",
        "amount": 500000,
        "currency": "VND",
        "paymentMethodId": "pm_card_visa",
        "returnUrl": "https://shop.test/payment-success",
    }
    data.update(overrides)
    return data


@pytest.mark.integration
def test_card_checkout_completes(client, notifier) -> None:
    resp = client.post("/api/payment/checkout", json=_body())
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["data"]["transactionId"] == "txn_stub"
    assert payload["data"]["success"] is True
    assert len(notifier.sent) == 1


@pytest.mark.integration
def test_signed_redirect_returns_url(client, notifier) -> None:
    resp = client.post(
        "/api/payment/checkout",
        json=_body(paymentMethod="vnpay", orderId="ORD1"),
        headers={"X-Forwarded-For": "203.0.113.9, 10.0.0.1"},
    )
    assert resp.status_code == 200
    url = resp.json()["data"]["redirectUrl"]
    assert "vnp_Amount=50000000" in url
    assert "vnp_IpAddr=203.0.113.9" in url
    assert notifier.sent == []


@pytest.mark.integration
def test_gateway_failure_is_402(client, notifier) -> None:
    resp = client.post("/api/payment/checkout", json=_body(paymentMethod="signed_json"))
    assert resp.status_code == 402
    assert resp.json()["data"]["failureReason"] == "transport error"
    assert notifier.sent == []


@pytest.mark.integration
def test_zero_amount_is_400(client) -> None:
    resp = client.post("/api/payment/checkout", json=_body(amount=0))
    assert resp.status_code == 400
    assert resp.json()["meta"]["errors"] is True


@pytest.mark.integration
def test_unknown_method_is_400(client) -> None:
    resp = client.post("/api/payment/checkout", json=_body(paymentMethod="bitcoin"))
    assert resp.status_code == 400
    assert "Invalid payment method" in resp.json()["meta"]["message"]


@pytest.mark.integration
def test_methods_listing(client) -> None:
    resp = client.get("/api/payment/methods")
    assert resp.json()["methods"] == ["card", "signed_json", "signed_redirect"]
