"""Purchase failure taxonomy

Raised inside the purchase transaction and converted to a Result Error by the
use case. Each kind has a stable code and a fixed message category so that
database or lock diagnostics never reach a client.
"""

from typing import Any, Dict, Iterable, Optional
from src.libs.result import Error


class PurchaseError(Exception):
    """Base class for every purchase failure"""

    code = "PURCHASE_FAILED"
    retryable = False

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None, reason: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.reason = reason

    def to_error(self) -> Error:
        return Error(
            code=self.code,
            message=self.message,
            reason=self.reason,
            details=self.details,
            retryable=self.retryable,
        )


class CartValidationError(PurchaseError):
    """Malformed cart: empty, non-positive quantity or duplicate product"""

    code = "VALIDATION_ERROR"

    def __init__(self, errors: Iterable[str]):
        errors = list(errors)
        super().__init__("Invalid cart", details={"errors": errors})
        self.errors = errors


class ProductsNotFound(PurchaseError):
    """One or more requested products are missing or inactive"""

    code = "PRODUCTS_NOT_FOUND"

    def __init__(self, missing_ids: Iterable[int]):
        missing_ids = sorted(missing_ids)
        super().__init__(
            f"Products not found or inactive: {', '.join(str(i) for i in missing_ids)}",
            details={"missing_ids": missing_ids},
        )
        self.missing_ids = missing_ids


class InsufficientStock(PurchaseError):
    code = "INSUFFICIENT_STOCK"

    def __init__(self, product_id: int, available: int, requested: int):
        super().__init__(
            f"Insufficient stock for product {product_id}. "
            f"Available: {available}, Requested: {requested}",
            details={"product_id": product_id, "available": available, "requested": requested},
        )
        self.product_id = product_id
        self.available = available
        self.requested = requested


class SequencingExhausted(PurchaseError):
    """No unique invoice number could be produced within the attempt bound"""

    code = "SEQUENCING_EXHAUSTED"

    def __init__(self, attempts: int):
        super().__init__(
            "Could not assign a unique invoice number",
            details={"attempts": attempts},
        )
        self.attempts = attempts


class TransientStoreFailure(PurchaseError):
    """Lock wait timeout, deadlock or similar; the whole purchase may be retried"""

    code = "TRANSIENT_STORE_FAILURE"
    retryable = True

    def __init__(self, reason: Optional[str] = None):
        super().__init__("The system is busy, please try again in a few seconds", reason=reason)


class FatalStoreFailure(PurchaseError):
    """Unexpected storage error"""

    code = "FATAL_STORE_FAILURE"

    def __init__(self, reason: Optional[str] = None):
        super().__init__("The purchase could not be processed", reason=reason)
