"""
Payment Gateway Abstraction
=============================
Each gateway implements build_request(), submit() and parse_result().
process() runs the three steps and folds provider/transport errors into Failed.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from common.exceptions import PaymentError
from modules.payment.models import CheckoutRequest, PaymentMethod

logger = logging.getLogger("checkout.gateway")

TIMEOUT_REASON = "timeout"
TRANSPORT_REASON = "transport error"


# ── Outcomes ──

@dataclass(frozen=True)
class Completed:
    """Funds captured; the provider returned a transaction id."""
    transaction_id: str


@dataclass(frozen=True)
class RedirectRequired:
    """Buyer must finish the flow on a provider-hosted page."""
    url: str


@dataclass(frozen=True)
class Failed:
    reason: str


GatewayOutcome = Union[Completed, RedirectRequired, Failed]


# ── Per-gateway configuration ──

@dataclass(frozen=True)
class StripeConfig:
    secret_key: str
    timeout: float = 15


@dataclass(frozen=True)
class PayPalConfig:
    client_id: str
    client_secret: str
    base_url: str = "https://api-m.sandbox.paypal.com"
    timeout: float = 15


@dataclass(frozen=True)
class VNPayConfig:
    tmn_code: str
    hash_secret: str
    payment_url: str = "https://sandbox.vnpayment.vn/paymentv2/vpcpay.html"
    version: str = "2.1.0"
    locale: str = ""


@dataclass(frozen=True)
class MomoConfig:
    partner_code: str
    access_key: str
    secret_key: str
    endpoint: str = "https://test-payment.momo.vn/v2/gateway/api/create"
    notify_url: str = ""
    timeout: float = 15


# ── Base ──

class BaseGateway:
    """Abstract gateway interface."""
    name: str = ""
    method: Optional[PaymentMethod] = None
    # None means any ISO-4217-like code is accepted
    supported_currencies: Optional[Tuple[str, ...]] = None
    required_fields: Tuple[str, ...] = ()

    def supports_currency(self, currency: str) -> bool:
        return self.supported_currencies is None or currency in self.supported_currencies

    def build_request(self, req: CheckoutRequest) -> Any:
        raise NotImplementedError

    def submit(self, provider_request: Any) -> Any:
        raise NotImplementedError

    def parse_result(self, raw: Any) -> GatewayOutcome:
        raise NotImplementedError

    def process(self, req: CheckoutRequest) -> GatewayOutcome:
        provider_request = self.build_request(req)
        try:
            raw = self.submit(provider_request)
        except PaymentError as e:
            logger.warning(f"{self.name} submit failed [{req.order_id}]: {e.message}")
            return Failed(reason=e.message)
        try:
            return self.parse_result(raw)
        except PaymentError as e:
            logger.warning(f"{self.name} rejected [{req.order_id}]: {e.message}")
            return Failed(reason=e.message)
