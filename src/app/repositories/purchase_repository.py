"""Purchase Repository Interface

Purchase record store: headers and lines, queryable by id, user and date.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional, Tuple
from src.domain.purchase import Purchase
from src.domain.purchase_line import PurchaseLine


class PurchaseRepository(ABC):
    """Repository interface for Purchase and PurchaseLine persistence"""

    @abstractmethod
    async def create(self, purchase: Purchase) -> Purchase:
        """
        Insert a purchase header

        Args:
            purchase: Purchase with invoice number and total already set

        Returns:
            Created Purchase with generated ID
        """
        pass

    @abstractmethod
    async def add_lines(self, lines: List[PurchaseLine]) -> List[PurchaseLine]:
        """
        Insert purchase lines

        Args:
            lines: Lines with purchase_id set

        Returns:
            Created lines with generated IDs
        """
        pass

    @abstractmethod
    async def get_by_id(self, purchase_id: int) -> Optional[Purchase]:
        pass

    @abstractmethod
    async def get_by_invoice_number(self, invoice_number: str) -> Optional[Purchase]:
        pass

    @abstractmethod
    async def invoice_number_exists(self, invoice_number: str) -> bool:
        """
        Check whether an invoice number is already taken

        Runs inside the caller's transaction.
        """
        pass

    @abstractmethod
    async def get_lines(self, purchase_ids: List[int]) -> Dict[int, List[PurchaseLine]]:
        """
        Retrieve lines for several purchases

        Returns:
            Mapping of purchase ID to its lines ordered by line ID
        """
        pass

    @abstractmethod
    async def list_purchases(
        self,
        user_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Purchase], int]:
        """
        Retrieve purchases, most recent first

        Args:
            user_id: Restrict to one purchaser
            start: Inclusive lower bound on purchased_at
            end: Inclusive upper bound on purchased_at
            limit: Maximum number of purchases to return
            offset: Offset for pagination

        Returns:
            Tuple of (purchases, total matching count)
        """
        pass
