"""
Payment Routes
================
JSON checkout endpoint over all registered gateways.

Endpoints:
  POST /api/payment/checkout — charge or start a redirect flow
  GET  /api/payment/methods  — enabled payment method ids
"""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from common.exceptions import UnsupportedMethodError, ValidationError
from common.helpers import get_real_ip
from modules.payment.service import CheckoutService, build_checkout_service, result_envelope

router = APIRouter(prefix="/api/payment", tags=["payment"])

_service: Optional[CheckoutService] = None


def get_checkout_service() -> CheckoutService:
    global _service
    if _service is None:
        _service = build_checkout_service()
    return _service


# ==========================================
# Schemas
# ==========================================

class CheckoutBody(BaseModel):
    paymentMethod: str = Field(..., min_length=1)
    orderId: str = ""
    userEmail: str = ""
    amount: Decimal
    currency: str = ""
    paymentMethodId: Optional[str] = None   # card
    returnUrl: Optional[str] = None         # redirect gateways
    orderInfo: Optional[str] = None


# ==========================================
# POST /api/payment/checkout
# ==========================================

@router.post("/checkout")
def checkout(
    body: CheckoutBody,
    request: Request,
    service: CheckoutService = Depends(get_checkout_service),
):
    try:
        req = service.build_request(
            payment_method=body.paymentMethod,
            order_id=body.orderId,
            amount=body.amount,
            currency=body.currency,
            buyer_email=body.userEmail,
            method_specific={
                "payment_method_id": body.paymentMethodId,
                "return_url": body.returnUrl,
                "order_info": body.orderInfo,
                "client_ip": get_real_ip(request),
            },
        )
        result = service.checkout(req)
    except (ValidationError, UnsupportedMethodError) as e:
        return JSONResponse(
            {"meta": {"message": e.message, "errors": True}},
            status_code=400,
        )

    return JSONResponse(result_envelope(result), status_code=200 if result.success else 402)


# ==========================================
# GET /api/payment/methods
# ==========================================

@router.get("/methods")
def payment_methods(service: CheckoutService = Depends(get_checkout_service)):
    return {"success": True, "methods": service.registry.names()}
