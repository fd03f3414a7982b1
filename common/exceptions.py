"""
Checkout Gateway - Custom Exceptions
=====================================
Business-level exceptions that can be caught and converted to HTTP responses.
"""


class CheckoutError(Exception):
    """Base exception for all checkout errors."""
    def __init__(self, message: str = "Payment processing failed"):
        self.message = message
        super().__init__(self.message)


class ValidationError(CheckoutError):
    """Raised when a checkout request is malformed (never reaches a provider)."""
    pass


class UnsupportedMethodError(CheckoutError):
    """Raised when the payment method is not registered."""
    def __init__(self, method: str = ""):
        self.method = method
        super().__init__(f"Invalid payment method: {method}" if method else "Invalid payment method")


class ConfigurationError(CheckoutError):
    """Raised when a gateway secret or merchant setting is missing."""
    pass


class PaymentError(CheckoutError):
    """Raised for payment gateway errors."""
    pass


class ProviderError(PaymentError):
    """Provider rejected the request or returned an error payload."""
    pass


class TransportError(PaymentError):
    """Network failure or timeout while talking to a provider."""
    def __init__(self, message: str = "transport error"):
        super().__init__(message)


class DeliveryError(CheckoutError):
    """Raised when the outbound mail channel rejects a notification."""
    pass
