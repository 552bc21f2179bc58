from .stock_ledger import SqlAlchemyStockLedger
from .purchase_repository import SqlAlchemyPurchaseRepository
from .product_repository import SqlAlchemyProductRepository
from .user_repository import SqlAlchemyUserRepository

__all__ = [
    "SqlAlchemyStockLedger",
    "SqlAlchemyPurchaseRepository",
    "SqlAlchemyProductRepository",
    "SqlAlchemyUserRepository",
]
