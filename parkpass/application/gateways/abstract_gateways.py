from abc import ABC, abstractmethod
from typing import Dict, Optional


class PaymentIntentResult:
    def __init__(
        self,
        id: str,
        status: str,
        amount: int,
        currency: str,
        client_secret: Optional[str] = None,
        metadata: Optional[Dict[str, str]] = None,
    ):
        self.id = id
        self.status = status
        self.amount = amount
        self.currency = currency
        self.client_secret = client_secret
        self.metadata = dict(metadata or {})

    @property
    def succeeded(self) -> bool:
        return self.status == "succeeded"


class AbstractPaymentGateway(ABC):
    @abstractmethod
    async def create_payment_intent(self, amount_cents: int, currency: str, metadata: Dict[str, str]) -> PaymentIntentResult:
        pass

    @abstractmethod
    async def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntentResult:
        pass


class AbstractEmailSender(ABC):
    @abstractmethod
    async def send(self, to: str, subject: str, html: str, text: Optional[str] = None) -> None:
        pass


class AbstractQrCodeRenderer(ABC):
    @abstractmethod
    def render_png(self, data: str) -> bytes:
        pass
