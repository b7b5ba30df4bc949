# gifty/domain/errors.py
from typing import Iterable


class NotFoundError(LookupError):
    """Referenced record (order, product, box, cart line, user) does not exist."""


class EmptyCartError(ValueError):
    def __init__(self, message: str = "Cart is empty"):
        super().__init__(message)


class InvalidDeliveryInfoError(ValueError):
    def __init__(self, missing_fields: Iterable[str]):
        self.missing_fields = list(missing_fields)
        super().__init__(f"Delivery info required: {', '.join(self.missing_fields)}")


class ProductUnavailableError(ValueError):
    def __init__(self, product_ids: Iterable[int]):
        self.product_ids = list(product_ids)
        ids = ", ".join(str(p) for p in self.product_ids)
        super().__init__(f"Products no longer available: {ids}")


class InvalidStatusError(ValueError):
    pass


class DuplicateEmailError(ValueError):
    pass


class InvalidResetTokenError(ValueError):
    pass


class AuthenticationError(PermissionError):
    pass


class ConcurrencyError(RuntimeError):
    """Cart was modified by another request between read and write."""


class CheckoutInProgressError(ConcurrencyError):
    pass
