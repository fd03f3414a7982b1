"""
Checkout Service
==================
Single checkout entry point over all registered gateways.

Per request: Validating → Dispatching → Notifying → Done (Failed from any step).
Validation problems are raised; gateway problems come back as a failed result.
"""

import logging
import re
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from config import settings
from common.exceptions import UnsupportedMethodError, ValidationError
from common.helpers import format_amount, safe_decimal, to_minor_units
from modules.payment.gateways import (
    BaseGateway, Completed, Failed, GatewayOutcome, RedirectRequired,
)
from modules.payment.models import (
    CheckoutRequest, CheckoutResult, CheckoutState, NotificationMessage, PaymentMethod,
)

logger = logging.getLogger("checkout.payment")

CURRENCY_RE = re.compile(r"^[A-Z]{3}$")


def build_payment_message(req: CheckoutRequest, result: CheckoutResult) -> NotificationMessage:
    amount = format_amount(req.amount)
    text = f"Your payment of {amount} {req.currency} for Order {req.order_id} was successful."
    html = (
        f"<p>Your payment of <strong>{amount} {req.currency}</strong> "
        f"for Order <strong>{req.order_id}</strong> was successful.</p>"
    )
    if result.transaction_id:
        text += f" Transaction: {result.transaction_id}"
        html += f"<p>Transaction: {result.transaction_id}</p>"
    return NotificationMessage(
        recipient=req.buyer_email,
        subject="Payment Successful",
        body_text=text,
        body_html=html,
    )


class CheckoutService:

    def __init__(self, registry, notifier=None, notify_on_redirect: Optional[bool] = None):
        self.registry = registry
        self.notifier = notifier
        self.notify_on_redirect = (
            settings.NOTIFY_ON_REDIRECT if notify_on_redirect is None else notify_on_redirect
        )

    # ==========================================
    # 🔍 Validating
    # ==========================================

    def build_request(
        self,
        payment_method: Any,
        order_id: Any,
        amount: Any,
        currency: Any,
        buyer_email: str = "",
        method_specific: Optional[Mapping[str, Any]] = None,
    ) -> CheckoutRequest:
        """Normalize raw caller input into a CheckoutRequest. Raises ValidationError."""
        value = safe_decimal(amount)
        if value is None:
            raise ValidationError("Amount must be a number")
        if value <= 0:
            raise ValidationError("Amount must be greater than zero")

        order_ref = str(order_id or "").strip()
        if not order_ref:
            raise ValidationError("Order id is required")

        code = str(currency or "").strip().upper()
        if not code:
            raise ValidationError("Currency is required")
        if not CURRENCY_RE.match(code):
            raise ValidationError(f"Invalid currency code: {currency}")

        method = PaymentMethod.parse(payment_method)
        extra = {k: str(v) for k, v in (method_specific or {}).items() if v is not None and v != ""}

        return CheckoutRequest(
            payment_method=method,
            order_id=order_ref,
            buyer_email=(buyer_email or "").strip(),
            amount=value,
            currency=code,
            method_specific=extra,
        )

    def validate(self, req: CheckoutRequest) -> BaseGateway:
        """Check invariants and resolve the gateway. No gateway code runs here."""
        if not isinstance(req.amount, Decimal) or not req.amount.is_finite() or req.amount <= 0:
            raise ValidationError("Amount must be greater than zero")
        if to_minor_units(req.amount) <= 0:
            raise ValidationError(f"Amount {req.amount} is below the smallest currency unit")
        if not req.order_id:
            raise ValidationError("Order id is required")
        if not req.currency:
            raise ValidationError("Currency is required")
        if not CURRENCY_RE.match(req.currency):
            raise ValidationError(f"Invalid currency code: {req.currency}")

        gw = self.registry.resolve(req.payment_method)

        if not gw.supports_currency(req.currency):
            raise ValidationError(f"Currency {req.currency} is not supported by {gw.name}")
        missing = [f for f in gw.required_fields if not req.option(f)]
        if missing:
            raise ValidationError(f"Missing fields for {gw.method.value}: {', '.join(missing)}")
        return gw

    # ==========================================
    # 💳 Checkout
    # ==========================================

    def checkout(self, req: CheckoutRequest) -> CheckoutResult:
        """
        Run one checkout.

        Raises:
            ValidationError: bad amount/currency/order id or missing method fields
            UnsupportedMethodError: method not registered
        """
        state = CheckoutState.VALIDATING
        try:
            gw = self.validate(req)
        except (ValidationError, UnsupportedMethodError) as e:
            logger.info(f"Checkout [{req.order_id}] rejected in {state.value}: {e.message}")
            raise

        state = CheckoutState.DISPATCHING
        outcome = self._dispatch(gw, req)
        result = self._compose(req, outcome)

        if not result.success:
            state = CheckoutState.FAILED
            logger.info(f"Checkout [{req.order_id}] {state.value}: {result.failure_reason}")
            return result

        if self._should_notify(outcome):
            state = CheckoutState.NOTIFYING
            self._notify(req, result)

        state = CheckoutState.DONE
        logger.info(
            f"Checkout [{req.order_id}] {state.value} via {gw.name}: "
            f"{'completed' if result.transaction_id else 'redirect'}"
        )
        return result

    def _dispatch(self, gw: BaseGateway, req: CheckoutRequest) -> GatewayOutcome:
        try:
            return gw.process(req)
        except Exception as e:
            logger.exception(f"Gateway {gw.name} crashed for order {req.order_id}")
            reason = getattr(e, "message", None) or str(e) or e.__class__.__name__
            return Failed(reason=reason)

    def _compose(self, req: CheckoutRequest, outcome: GatewayOutcome) -> CheckoutResult:
        common = {"payment_method": req.payment_method.value, "order_id": req.order_id}
        if isinstance(outcome, Completed):
            return CheckoutResult(success=True, transaction_id=outcome.transaction_id, **common)
        if isinstance(outcome, RedirectRequired):
            return CheckoutResult(success=True, redirect_url=outcome.url, **common)
        reason = outcome.reason if isinstance(outcome, Failed) else "unknown gateway outcome"
        return CheckoutResult(success=False, failure_reason=reason or "payment failed", **common)

    # ==========================================
    # ✉️ Notifying
    # ==========================================

    def _should_notify(self, outcome: GatewayOutcome) -> bool:
        if self.notifier is None:
            return False
        if isinstance(outcome, Completed):
            return True
        return isinstance(outcome, RedirectRequired) and self.notify_on_redirect

    def _notify(self, req: CheckoutRequest, result: CheckoutResult) -> None:
        if not req.buyer_email:
            logger.warning(f"Order {req.order_id} paid but no buyer email to notify")
            return
        msg = build_payment_message(req, result)
        try:
            self.notifier.send(msg.recipient, msg.subject, msg.body_text, msg.body_html)
        except Exception as e:
            # The payment already went through; a lost email does not undo it
            logger.error(f"Confirmation email for order {req.order_id} failed: {e}")


def build_checkout_service() -> CheckoutService:
    from common.notifications import email_notifier
    from modules.payment.registry import build_registry
    return CheckoutService(build_registry(), notifier=email_notifier)


def result_envelope(result: CheckoutResult) -> Dict[str, Any]:
    if result.success and result.transaction_id:
        message = "Payment processed successfully"
    elif result.success:
        message = "Payment initiated, redirect required"
    else:
        message = "Payment failed, please try again"
    return {"meta": {"message": message}, "data": result.to_dict()}
