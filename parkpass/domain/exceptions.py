from typing import Optional


class NotFoundError(ValueError):
    def __init__(self, entity: str, key):
        super().__init__(f"{entity} {key} not found")
        self.entity = entity
        self.key = key


class BookingError(ValueError):
    pass


class PaymentProviderError(Exception):
    pass


class EmailNotConfiguredError(Exception):
    pass


class EmailDeliveryError(Exception):
    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.details = details


class DuplicateOrderError(BookingError):
    def __init__(self, payment_intent_id: str):
        super().__init__(f"Payment intent {payment_intent_id} is already recorded")
        self.payment_intent_id = payment_intent_id
