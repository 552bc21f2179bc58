"""Stock Ledger Interface

Authoritative, concurrency-safe view of each product's available quantity.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable
from src.domain.product import Product


class StockLedger(ABC):
    """
    Ledger of available product quantities

    Contract:
    - lock_and_fetch takes an exclusive row lock on every requested product,
      in ascending id order, held until the enclosing transaction ends
    - decrement is only valid for products locked in the same transaction
    - Nothing is visible to other transactions before commit; a rollback
      restores every quantity
    """

    @abstractmethod
    async def lock_and_fetch(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        """
        Lock and load active products

        Args:
            product_ids: Product IDs to lock (duplicates ignored)

        Returns:
            Mapping of product ID to locked Product

        Raises:
            ProductsNotFound: any ID is missing or inactive
            TransientStoreFailure: lock wait timed out or deadlocked
        """
        pass

    @abstractmethod
    async def decrement(self, product_id: int, amount: int) -> int:
        """
        Decrement a locked product's available quantity

        Args:
            product_id: Product ID previously returned by lock_and_fetch
            amount: Units to remove (> 0)

        Returns:
            New available quantity

        Raises:
            InsufficientStock: amount exceeds the available quantity
            FatalStoreFailure: product is not locked by this ledger
        """
        pass

    @abstractmethod
    def release(self) -> None:
        """Forget locks held by the finished transaction"""
        pass
