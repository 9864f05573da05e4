from .abstract_gateways import (
    PaymentIntentResult,
    AbstractPaymentGateway,
    AbstractEmailSender,
    AbstractQrCodeRenderer,
)

__all__ = [
    "PaymentIntentResult",
    "AbstractPaymentGateway",
    "AbstractEmailSender",
    "AbstractQrCodeRenderer",
]
