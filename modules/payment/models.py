"""
Payment Module - Models
========================
Request/result value objects for the checkout pipeline.
Nothing here is persisted; every object lives for one checkout call.
"""

import enum
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Mapping, Optional

from common.exceptions import UnsupportedMethodError
from common.helpers import safe_decimal


class PaymentMethod(str, enum.Enum):
    CARD = "card"                        # Stripe
    CAPTURE_WALLET = "capture_wallet"    # PayPal
    SIGNED_REDIRECT = "signed_redirect"  # VNPay
    SIGNED_JSON = "signed_json"          # MoMo

    @classmethod
    def parse(cls, value) -> "PaymentMethod":
        """Accept a method id or the provider name it stands for."""
        if isinstance(value, cls):
            return value
        key = str(value or "").strip().lower()
        key = METHOD_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise UnsupportedMethodError(str(value or ""))


METHOD_ALIASES = {
    "stripe": "card",
    "paypal": "capture_wallet",
    "vnpay": "signed_redirect",
    "momo": "signed_json",
}


class CheckoutState(str, enum.Enum):
    VALIDATING = "Validating"
    DISPATCHING = "Dispatching"
    NOTIFYING = "Notifying"
    DONE = "Done"
    FAILED = "Failed"


@dataclass(frozen=True)
class CheckoutRequest:
    payment_method: PaymentMethod
    order_id: str
    buyer_email: str
    amount: Decimal
    currency: str
    method_specific: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        # Frozen: coerce through object.__setattr__
        object.__setattr__(self, "payment_method", PaymentMethod.parse(self.payment_method))
        amount = safe_decimal(self.amount)
        if amount is not None:
            object.__setattr__(self, "amount", amount)

    def option(self, name: str, default: str = "") -> str:
        value = self.method_specific.get(name)
        return default if value is None else str(value)


@dataclass(frozen=True)
class CheckoutResult:
    success: bool
    transaction_id: Optional[str] = None
    redirect_url: Optional[str] = None
    failure_reason: Optional[str] = None
    payment_method: Optional[str] = None
    order_id: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "success": self.success,
            "paymentMethod": self.payment_method,
            "orderId": self.order_id,
        }
        if self.transaction_id:
            data["transactionId"] = self.transaction_id
        if self.redirect_url:
            data["redirectUrl"] = self.redirect_url
        if self.failure_reason:
            data["failureReason"] = self.failure_reason
        return data


@dataclass(frozen=True)
class NotificationMessage:
    recipient: str
    subject: str
    body_text: str
    body_html: str
