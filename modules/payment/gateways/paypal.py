"""
PayPal Gateway (capture wallet)
=================================
REST/JSON with Basic Auth token. CreateOrder(intent=CAPTURE) → approve redirect.
Funds are never captured here; the buyer approves on PayPal.
"""

import logging
from typing import Any, Dict

import requests

from common.exceptions import ConfigurationError, ProviderError, TransportError
from common.helpers import format_amount
from modules.payment.gateways import (
    TIMEOUT_REASON, BaseGateway, Completed, Failed, GatewayOutcome,
    PayPalConfig, RedirectRequired,
)
from modules.payment.models import CheckoutRequest, PaymentMethod

logger = logging.getLogger("checkout.gateway.paypal")

APPROVAL_RELS = ("approve", "payer-action")


class PayPalGateway(BaseGateway):
    name = "paypal"
    method = PaymentMethod.CAPTURE_WALLET

    def __init__(self, config: PayPalConfig):
        self.config = config

    def _access_token(self) -> str:
        if not self.config.client_id or not self.config.client_secret:
            raise ConfigurationError("PayPal credentials are not configured")

        resp = requests.post(
            f"{self.config.base_url}/v1/oauth2/token",
            auth=(self.config.client_id, self.config.client_secret),
            data={"grant_type": "client_credentials"},
            headers={"Accept": "application/json"},
            timeout=self.config.timeout,
        )
        data = resp.json()
        if not isinstance(data, dict):
            raise ProviderError("PayPal returned an unreadable response")
        token = data.get("access_token")
        if resp.status_code != 200 or not token:
            msg = data.get("error_description") or data.get("error") or f"HTTP {resp.status_code}"
            raise ProviderError(f"PayPal authentication failed: {msg}")
        return token

    def build_request(self, req: CheckoutRequest) -> Dict[str, Any]:
        return {
            "intent": "CAPTURE",
            "purchase_units": [
                {
                    "reference_id": req.order_id,
                    "amount": {
                        "currency_code": req.currency,
                        "value": format_amount(req.amount),
                    },
                }
            ],
        }

    def submit(self, provider_request: Dict[str, Any]) -> Dict[str, Any]:
        order_ref = provider_request["purchase_units"][0]["reference_id"]
        try:
            token = self._access_token()
            resp = requests.post(
                f"{self.config.base_url}/v2/checkout/orders",
                json=provider_request,
                headers={
                    "Authorization": f"Bearer {token}",
                    "Content-Type": "application/json",
                },
                timeout=self.config.timeout,
            )
            result = resp.json()
        except requests.Timeout:
            logger.error(f"PayPal timeout [{order_ref}]")
            raise TransportError(TIMEOUT_REASON)
        except ValueError:
            raise ProviderError("PayPal returned an unreadable response")
        except requests.RequestException as e:
            logger.error(f"PayPal connection error [{order_ref}]: {e}")
            raise TransportError()

        if not isinstance(result, dict):
            raise ProviderError("PayPal returned an unreadable response")
        logger.info(f"PayPal order [{order_ref}]: status={result.get('status')} id={result.get('id')}")

        if resp.status_code >= 400:
            msg = result.get("message") or result.get("name") or f"HTTP {resp.status_code}"
            raise ProviderError(f"PayPal order failed: {msg}")
        return result

    def parse_result(self, raw: Dict[str, Any]) -> GatewayOutcome:
        order_id = raw.get("id")
        status = raw.get("status")

        # Only a provider-side capture counts as completion
        if status == "COMPLETED" and order_id:
            return Completed(transaction_id=str(order_id))

        for link in raw.get("links", []):
            if link.get("rel") in APPROVAL_RELS and link.get("href"):
                return RedirectRequired(url=link["href"])

        return Failed(reason=f"PayPal order has no approval link (status: {status})")
