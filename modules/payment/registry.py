"""
Gateway Registry
==================
Payment method → gateway lookup. Built once at startup, read-only afterwards.
"""

import logging
from types import MappingProxyType
from typing import Iterable, List, Optional

from config import settings
from common.exceptions import UnsupportedMethodError
from modules.payment.gateways import (
    BaseGateway, MomoConfig, PayPalConfig, StripeConfig, VNPayConfig,
)
from modules.payment.gateways.momo import MomoGateway
from modules.payment.gateways.paypal import PayPalGateway
from modules.payment.gateways.stripe_card import StripeGateway
from modules.payment.gateways.vnpay import VNPayGateway
from modules.payment.models import PaymentMethod

logger = logging.getLogger("checkout.registry")


class GatewayRegistry:

    def __init__(self, gateways: Iterable[BaseGateway]):
        table = {}
        for gw in gateways:
            if gw.method in table:
                raise ValueError(f"Duplicate gateway for method {gw.method.value}")
            table[gw.method] = gw
        self._gateways = MappingProxyType(table)

    def resolve(self, method) -> BaseGateway:
        try:
            key = PaymentMethod.parse(method)
        except UnsupportedMethodError:
            logger.warning(f"Unsupported payment method requested: {method!r}")
            raise
        gw = self._gateways.get(key)
        if gw is None:
            logger.warning(f"Payment method not enabled: {key.value}")
            raise UnsupportedMethodError(key.value)
        return gw

    def names(self) -> List[str]:
        return [m.value for m in self._gateways]

    def __contains__(self, method) -> bool:
        try:
            return PaymentMethod.parse(method) in self._gateways
        except UnsupportedMethodError:
            return False


def build_registry(enabled: Optional[str] = None) -> GatewayRegistry:
    """Construct all enabled gateways from static settings."""
    raw = settings.ENABLED_GATEWAYS if enabled is None else enabled
    wanted = {PaymentMethod.parse(g.strip()) for g in raw.split(",") if g.strip()}
    timeout = settings.GATEWAY_TIMEOUT_SECONDS

    factories = {
        PaymentMethod.CARD: lambda: StripeGateway(StripeConfig(
            secret_key=settings.STRIPE_SECRET_KEY,
            timeout=timeout,
        )),
        PaymentMethod.CAPTURE_WALLET: lambda: PayPalGateway(PayPalConfig(
            client_id=settings.PAYPAL_CLIENT_ID,
            client_secret=settings.PAYPAL_CLIENT_SECRET,
            base_url=settings.PAYPAL_BASE_URL,
            timeout=timeout,
        )),
        PaymentMethod.SIGNED_REDIRECT: lambda: VNPayGateway(VNPayConfig(
            tmn_code=settings.VNPAY_TMN_CODE,
            hash_secret=settings.VNPAY_HASH_SECRET,
            payment_url=settings.VNPAY_URL,
        )),
        PaymentMethod.SIGNED_JSON: lambda: MomoGateway(MomoConfig(
            partner_code=settings.MOMO_PARTNER_CODE,
            access_key=settings.MOMO_ACCESS_KEY,
            secret_key=settings.MOMO_SECRET_KEY,
            endpoint=settings.MOMO_ENDPOINT,
            notify_url=settings.MOMO_NOTIFY_URL,
            timeout=timeout,
        )),
    }

    registry = GatewayRegistry(factories[m]() for m in PaymentMethod if m in wanted)
    logger.info(f"Gateway registry ready: {', '.join(registry.names())}")
    return registry
