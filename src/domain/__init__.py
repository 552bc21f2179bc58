from .base import BaseModel
from .user import User, UserRole
from .product import Product
from .purchase import Purchase, PurchaseStatus
from .purchase_line import PurchaseLine
from .exceptions import (
    PurchaseError,
    CartValidationError,
    ProductsNotFound,
    InsufficientStock,
    SequencingExhausted,
    TransientStoreFailure,
    FatalStoreFailure,
)

__all__ = [
    "BaseModel",
    "User",
    "UserRole",
    "Product",
    "Purchase",
    "PurchaseStatus",
    "PurchaseLine",
    "PurchaseError",
    "CartValidationError",
    "ProductsNotFound",
    "InsufficientStock",
    "SequencingExhausted",
    "TransientStoreFailure",
    "FatalStoreFailure",
]
