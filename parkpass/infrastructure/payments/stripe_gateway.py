import asyncio
from typing import Dict, Optional

import stripe
from loguru import logger

from parkpass.application.gateways import AbstractPaymentGateway, PaymentIntentResult
from parkpass.config.settings_env import settings
from parkpass.domain.exceptions import PaymentProviderError


def _to_result(intent) -> PaymentIntentResult:
    metadata = intent.metadata or {}
    return PaymentIntentResult(
        id=intent.id,
        status=intent.status,
        amount=intent.amount,
        currency=intent.currency,
        client_secret=intent.client_secret,
        metadata={key: str(metadata[key]) for key in metadata.keys()},
    )


class StripePaymentGateway(AbstractPaymentGateway):
    """Card payments through Stripe PaymentIntents.

    The SDK is synchronous, so each request runs in a worker thread.
    """

    def __init__(self, api_key: Optional[str] = None, api_version: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.STRIPE_SECRET_KEY
        self.api_version = api_version or settings.STRIPE_API_VERSION

    def _check_configured(self):
        if not self.api_key:
            raise PaymentProviderError("Stripe is not configured (STRIPE_SECRET_KEY is missing)")

    async def create_payment_intent(self, amount_cents: int, currency: str, metadata: Dict[str, str]) -> PaymentIntentResult:
        self._check_configured()
        try:
            intent = await asyncio.to_thread(
                stripe.PaymentIntent.create,
                amount=amount_cents,
                currency=currency,
                metadata=metadata,
                api_key=self.api_key,
                stripe_version=self.api_version,
            )
        except stripe.StripeError as e:
            logger.error(f"Payment intent error: {e}")
            raise PaymentProviderError("Unable to create payment intent") from e
        return _to_result(intent)

    async def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntentResult:
        self._check_configured()
        try:
            intent = await asyncio.to_thread(
                stripe.PaymentIntent.retrieve,
                payment_intent_id,
                api_key=self.api_key,
                stripe_version=self.api_version,
            )
        except stripe.StripeError as e:
            logger.error(f"Unable to retrieve payment intent {payment_intent_id}: {e}")
            raise PaymentProviderError(f"Unable to retrieve payment intent {payment_intent_id}") from e
        return _to_result(intent)
