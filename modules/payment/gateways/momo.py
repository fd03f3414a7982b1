"""
MoMo Gateway (signed JSON)
============================
REST/JSON. HMAC-SHA256 over a fixed-order raw string → payUrl redirect.
"""

import httpx
import logging
from typing import Any, Dict

from common.exceptions import ProviderError, TransportError
from common.helpers import format_amount
from modules.payment.gateways import (
    TIMEOUT_REASON, BaseGateway, GatewayOutcome, MomoConfig, RedirectRequired,
)
from modules.payment.models import CheckoutRequest, PaymentMethod
from modules.payment.signing import HashAlgorithm, fixed_order_raw, sign

logger = logging.getLogger("checkout.gateway.momo")

REQUEST_TYPE = "captureWallet"

# Field order fixed by the MoMo protocol
SIGNATURE_FIELDS = (
    "accessKey", "amount", "orderId", "orderInfo", "partnerCode", "requestId", "returnUrl",
)


def raw_signature(body: Dict[str, str]) -> str:
    return fixed_order_raw(body, SIGNATURE_FIELDS)


class MomoGateway(BaseGateway):
    name = "momo"
    method = PaymentMethod.SIGNED_JSON
    supported_currencies = ("VND",)
    required_fields = ("return_url",)

    def __init__(self, config: MomoConfig):
        self.config = config

    def build_request(self, req: CheckoutRequest) -> Dict[str, str]:
        body = {
            "partnerCode": self.config.partner_code,
            "accessKey": self.config.access_key,
            "requestId": req.order_id,
            "amount": format_amount(req.amount),
            "orderId": req.order_id,
            "orderInfo": req.option("order_info") or f"Payment for order #{req.order_id}",
            "returnUrl": req.option("return_url"),
            "notifyUrl": self.config.notify_url,
            "requestType": REQUEST_TYPE,
            "signature": "",
        }
        body["signature"] = sign(raw_signature(body), self.config.secret_key, HashAlgorithm.SHA256)
        return body

    def submit(self, provider_request: Dict[str, str]) -> Dict[str, Any]:
        order_ref = provider_request["orderId"]
        try:
            resp = httpx.post(self.config.endpoint, json=provider_request, timeout=self.config.timeout)
            data = resp.json()
        except httpx.TimeoutException:
            logger.error(f"MoMo timeout [{order_ref}]")
            raise TransportError(TIMEOUT_REASON)
        except httpx.HTTPError as e:
            logger.error(f"MoMo connection error [{order_ref}]: {e}")
            raise TransportError()
        except ValueError:
            raise ProviderError("MoMo returned an unreadable response")

        if not isinstance(data, dict):
            raise ProviderError("MoMo returned an unreadable response")
        logger.info(f"MoMo create [{order_ref}]: resultCode={data.get('resultCode')}")
        return data

    def parse_result(self, raw: Dict[str, Any]) -> GatewayOutcome:
        pay_url = raw.get("payUrl")
        if raw.get("resultCode") == 0 and pay_url:
            return RedirectRequired(url=pay_url)

        msg = raw.get("message") or raw.get("localMessage") or f"code {raw.get('resultCode')}"
        raise ProviderError(f"MoMo payment failed: {msg}")
