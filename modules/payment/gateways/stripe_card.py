"""
Stripe Gateway (card)
======================
Direct charge via PaymentIntent with confirm=true. Amount in minor units.
"""

import logging
from typing import Any, Dict

import requests
import stripe

from common.exceptions import ConfigurationError, ProviderError, TransportError, ValidationError
from common.helpers import to_minor_units
from modules.payment.gateways import (
    TIMEOUT_REASON, BaseGateway, Completed, Failed, GatewayOutcome, RedirectRequired, StripeConfig,
)
from modules.payment.models import CheckoutRequest, PaymentMethod

logger = logging.getLogger("checkout.gateway.stripe")


def _timed_out(exc: BaseException) -> bool:
    """RequestsClient wraps the underlying requests error; walk the chain for a Timeout."""
    seen = set()
    err = exc.__cause__ or exc.__context__
    while err is not None and id(err) not in seen:
        if isinstance(err, requests.Timeout):
            return True
        seen.add(id(err))
        err = err.__cause__ or err.__context__
    return False


class StripeGateway(BaseGateway):
    name = "stripe"
    method = PaymentMethod.CARD
    required_fields = ("payment_method_id",)

    def __init__(self, config: StripeConfig, client=None):
        self.config = config
        self._client = client

    def _get_client(self):
        # Built lazily so a missing key only fails the card method
        if self._client is None:
            if not self.config.secret_key:
                raise ConfigurationError("Stripe secret key is not configured")
            self._client = stripe.StripeClient(
                self.config.secret_key,
                http_client=stripe.RequestsClient(timeout=self.config.timeout),
                max_network_retries=0,
            )
        return self._client

    def build_request(self, req: CheckoutRequest) -> Dict[str, Any]:
        token = req.option("payment_method_id")
        if not token:
            raise ValidationError("Stripe payment requires a payment method token")

        params = {
            "amount": to_minor_units(req.amount),
            "currency": req.currency.lower(),
            "payment_method": token,
            "confirm": True,
            "metadata": {"order_id": req.order_id},
        }
        return_url = req.option("return_url")
        if return_url:
            params["return_url"] = return_url
        else:
            params["automatic_payment_methods"] = {"enabled": True, "allow_redirects": "never"}
        if req.buyer_email:
            params["receipt_email"] = req.buyer_email
        return params

    def submit(self, provider_request: Dict[str, Any]):
        client = self._get_client()
        order_ref = provider_request["metadata"]["order_id"]
        try:
            intent = client.v1.payment_intents.create(params=provider_request)
        except stripe.APIConnectionError as e:
            if _timed_out(e):
                logger.error(f"Stripe timeout [{order_ref}]")
                raise TransportError(TIMEOUT_REASON)
            logger.error(f"Stripe connection error [{order_ref}]: {e}")
            raise TransportError()
        except stripe.StripeError as e:
            logger.error(f"Stripe payment error [{order_ref}]: {e}")
            raise ProviderError(e.user_message or str(e))

        logger.info(f"Stripe intent [{order_ref}]: id={intent.id} status={intent.status}")
        return intent

    def parse_result(self, raw) -> GatewayOutcome:
        status = raw.status
        if status == "succeeded":
            return Completed(transaction_id=raw.id)

        if status == "requires_action":
            next_action = getattr(raw, "next_action", None)
            redirect = getattr(next_action, "redirect_to_url", None) if next_action else None
            url = getattr(redirect, "url", None) if redirect else None
            if url:
                return RedirectRequired(url=url)

        return Failed(reason=f"Stripe payment not completed (status: {status})")
