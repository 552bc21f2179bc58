"""Product Repository Interface

Read-only catalog lookups. Quantity changes go through the StockLedger.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable
from src.domain.product import Product


class ProductRepository(ABC):
    @abstractmethod
    async def get_by_ids(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        """Retrieve products by ID, including inactive ones"""
        pass
