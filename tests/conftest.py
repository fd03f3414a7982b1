"""
Pytest configuration and fixtures.
"""
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, List

import pytest

from modules.payment.gateways import (
    BaseGateway, Completed, MomoConfig, PayPalConfig, StripeConfig, VNPayConfig,
)
from modules.payment.models import CheckoutRequest, PaymentMethod

FIXED_NOW = datetime(2024, 3, 5, 7, 8, 9, tzinfo=timezone.utc)


class RecordingNotifier:
    """Notifier double that records every send() call."""

    def __init__(self, error: Exception = None):
        self.sent: List[Dict[str, str]] = []
        self.error = error

    def send(self, recipient: str, subject: str, text: str, html: str) -> bool:
        self.sent.append({"recipient": recipient, "subject": subject, "text": text, "html": html})
        if self.error is not None:
            raise self.error
        return True


class StubGateway(BaseGateway):
    """Gateway double returning a canned outcome and counting calls."""
    name = "stub"

    def __init__(self, method: PaymentMethod, outcome=None, error: Exception = None, currencies=None):
        self.method = method
        self.outcome = outcome or Completed(transaction_id="txn_stub")
        self.error = error
        self.supported_currencies = currencies
        self.calls = 0

    def build_request(self, req):
        self.calls += 1
        return req

    def submit(self, provider_request):
        if self.error is not None:
            raise self.error
        return self.outcome

    def parse_result(self, raw):
        return raw


@pytest.fixture
def stripe_config() -> StripeConfig:
    return StripeConfig(secret_key="sk_test_fake_key_for_testing", timeout=5)


@pytest.fixture
def paypal_config() -> PayPalConfig:
    return PayPalConfig(
        client_id="client-id",
        client_secret="client-secret",
        base_url="https://paypal.test",
        timeout=5,
    )


@pytest.fixture
def vnpay_config() -> VNPayConfig:
    return VNPayConfig(
        tmn_code="TESTTMN1",
        hash_secret="VNPAYSECRETKEYFORTESTS",
        payment_url="https://sandbox.vnpayment.vn/paymentv2/vpcpay.html",
    )


@pytest.fixture
def momo_config() -> MomoConfig:
    return MomoConfig(
        partner_code="MOMOTEST",
        access_key="F8BBA842ECF85",
        secret_key="K951B6PE1waDMi640xX08PD3vg6EkVlz",
        endpoint="https://momo.test/v2/gateway/api/create",
        notify_url="https://shop.test/api/payment/momo/notify",
        timeout=5,
    )


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


def make_request(method: PaymentMethod = PaymentMethod.SIGNED_REDIRECT, **overrides: Any) -> CheckoutRequest:
    data = {
        "payment_method": method,
        "order_id": "ORD1",
        "buyer_email": "buyer@example.com",
        "amount": Decimal("500000"),
        "currency": "VND",
        "method_specific": {"return_url": "https://shop.test/payment-success", "client_ip": "10.0.0.7"},
    }
    data.update(overrides)
    return CheckoutRequest(**data)


@pytest.fixture
def sample_request() -> CheckoutRequest:
    return make_request()
