"""
VNPay Gateway (signed redirect)
=================================
Sorted + URL-encoded query, HMAC-SHA512 → browser redirect.
No server-side call: the buyer's browser talks to VNPay.
"""

import logging
from typing import Callable, Optional

from common.helpers import compact_timestamp, now_utc, to_minor_units
from modules.payment.gateways import (
    BaseGateway, GatewayOutcome, RedirectRequired, VNPayConfig,
)
from modules.payment.models import CheckoutRequest, PaymentMethod
from modules.payment.signing import HashAlgorithm, SignedParameterSet

logger = logging.getLogger("checkout.gateway.vnpay")

SECURE_HASH_PARAM = "vnp_SecureHash"
DEFAULT_CLIENT_IP = "127.0.0.1"


class VNPayGateway(BaseGateway):
    name = "vnpay"
    method = PaymentMethod.SIGNED_REDIRECT
    supported_currencies = ("VND",)
    required_fields = ("return_url",)

    def __init__(self, config: VNPayConfig, clock: Optional[Callable] = None):
        self.config = config
        self._clock = clock or now_utc

    def build_request(self, req: CheckoutRequest) -> SignedParameterSet:
        params = SignedParameterSet()
        params.set("vnp_Version", self.config.version)
        params.set("vnp_Command", "pay")
        params.set("vnp_TmnCode", self.config.tmn_code)
        params.set("vnp_Amount", to_minor_units(req.amount))
        params.set("vnp_CurrCode", req.currency)
        params.set("vnp_TxnRef", req.order_id)
        params.set("vnp_OrderInfo", req.option("order_info") or f"Payment for order #{req.order_id}")
        params.set("vnp_ReturnUrl", req.option("return_url"))
        params.set("vnp_IpAddr", req.option("client_ip") or DEFAULT_CLIENT_IP)
        params.set("vnp_CreateDate", compact_timestamp(self._clock()))
        if self.config.locale:
            params.set("vnp_Locale", self.config.locale)

        params.seal(self.config.hash_secret, HashAlgorithm.SHA512)
        return params

    def submit(self, provider_request: SignedParameterSet) -> str:
        url = (
            f"{self.config.payment_url}?{provider_request.query()}"
            f"&{SECURE_HASH_PARAM}={provider_request.signature}"
        )
        logger.info(f"VNPay redirect [{provider_request.params['vnp_TxnRef']}] built")
        return url

    def parse_result(self, raw: str) -> GatewayOutcome:
        return RedirectRequired(url=raw)
