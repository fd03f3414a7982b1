"""
Checkout Gateway - Centralized Configuration
=============================================
All environment variables and constants are loaded here.
No other module should call os.getenv() directly.
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


# ==========================================
# 💳 Card (Stripe)
# ==========================================
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY", "")


# ==========================================
# 💳 Capture Wallet (PayPal Orders API)
# ==========================================
PAYPAL_CLIENT_ID = os.getenv("PAYPAL_CLIENT_ID", "")
PAYPAL_CLIENT_SECRET = os.getenv("PAYPAL_CLIENT_SECRET", "")
PAYPAL_BASE_URL = os.getenv("PAYPAL_BASE_URL", "https://api-m.sandbox.paypal.com")


# ==========================================
# 💳 Signed Redirect (VNPay, HMAC-SHA512)
# ==========================================
VNPAY_TMN_CODE = os.getenv("TMN_CODE", "")
VNPAY_HASH_SECRET = os.getenv("VNPAY_HASH_SECRET", "")
VNPAY_URL = os.getenv("VNPAY_URL", "https://sandbox.vnpayment.vn/paymentv2/vpcpay.html")


# ==========================================
# 💳 Signed JSON (MoMo, HMAC-SHA256)
# ==========================================
MOMO_PARTNER_CODE = os.getenv("MOMO_PARTNER_CODE", "")
MOMO_ACCESS_KEY = os.getenv("MOMO_ACCESS_KEY", "")
MOMO_SECRET_KEY = os.getenv("MOMO_SECRET_KEY", "")
MOMO_ENDPOINT = os.getenv("MOMO_ENDPOINT", "https://test-payment.momo.vn/v2/gateway/api/create")
MOMO_NOTIFY_URL = os.getenv("MOMO_NOTIFY_URL", "")


# ==========================================
# 🔀 Dispatch
# ==========================================
ENABLED_GATEWAYS = os.getenv("ENABLED_GATEWAYS", "card,capture_wallet,signed_redirect,signed_json")
GATEWAY_TIMEOUT_SECONDS = float(os.getenv("GATEWAY_TIMEOUT_SECONDS") or "15")

# Redirect outcomes are not captured funds; confirmation mail waits for completion
NOTIFY_ON_REDIRECT = _flag("NOTIFY_ON_REDIRECT")


# ==========================================
# ✉️ Email
# ==========================================
SMTP_HOST = os.getenv("SMTP_HOST", "")
SMTP_PORT = int(os.getenv("SMTP_PORT") or "587")
SMTP_USERNAME = os.getenv("SMTP_USERNAME", "")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
SMTP_USE_TLS = _flag("SMTP_USE_TLS", "true")
SMTP_TIMEOUT_SECONDS = float(os.getenv("SMTP_TIMEOUT_SECONDS") or "10")
MAIL_FROM = os.getenv("MAIL_FROM", "no-reply@localhost")


# ==========================================
# 🔧 App
# ==========================================
DEBUG = _flag("DEBUG")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Base URL for return/notify links
BASE_URL = os.getenv("BASE_URL", "http://127.0.0.1:8000")
