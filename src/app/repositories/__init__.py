from .stock_ledger import StockLedger
from .purchase_repository import PurchaseRepository
from .product_repository import ProductRepository
from .user_repository import UserRepository

__all__ = [
    "StockLedger",
    "PurchaseRepository",
    "ProductRepository",
    "UserRepository",
]
