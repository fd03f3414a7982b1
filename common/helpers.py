"""
Checkout Gateway - Shared Helpers
==================================
Pure utility functions with NO gateway or module dependencies.
"""

from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Optional


def now_utc() -> datetime:
    """Returns current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def compact_timestamp(value: datetime) -> str:
    """Format a datetime as YYYYMMDDHHmmss in UTC, no separators."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y%m%d%H%M%S")


def safe_decimal(value) -> Optional[Decimal]:
    """Safely convert a value to Decimal. Returns None on failure."""
    if value is None:
        return None
    try:
        d = Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return None
    if not d.is_finite():
        return None
    return d


def to_minor_units(amount: Decimal) -> int:
    """Amount x 100 as an integer (half-up on sub-minor fractions)."""
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_amount(value) -> str:
    """Format a decimal amount, removing unnecessary trailing zeros."""
    if value is None:
        return ""
    try:
        d = Decimal(str(value))
        normalized = d.normalize()
        if normalized.as_tuple().exponent > 0:
            return str(int(d))
        return "{:f}".format(normalized)
    except Exception:
        return str(value)


def get_real_ip(request) -> str:
    """Extract real client IP from request (handles X-Forwarded-For proxy header)."""
    x_forwarded = request.headers.get("X-Forwarded-For")
    if x_forwarded:
        return x_forwarded.split(",")[0].strip()
    return request.client.host if request.client else ""
