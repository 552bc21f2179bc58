"""
List Purchases Use Case

Retrieves purchases by purchaser and date range.
"""
from datetime import datetime
from typing import Optional
from src.libs.result import Result, Return
from src.app.repositories.purchase_repository import PurchaseRepository
from src.app.repositories.product_repository import ProductRepository
from .dtos import ListPurchasesResponseDTO, PurchaseResponseDTO


class ListPurchases:
    """
    Use case: List purchases

    Purchases are ordered by purchased_at DESC (most recent first).
    """

    def __init__(self, purchase_repo: PurchaseRepository, product_repo: ProductRepository):
        self.purchase_repo = purchase_repo
        self.product_repo = product_repo

    async def execute(
        self,
        user_id: Optional[int] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Result[ListPurchasesResponseDTO]:
        """
        List purchases with their lines.

        Args:
            user_id: Purchaser filter (None lists every purchaser)
            start: Inclusive lower bound on purchased_at
            end: Inclusive upper bound on purchased_at
            limit: Maximum number of purchases to return (default 20)
            offset: Number of purchases to skip (default 0)

        Returns:
            Result[ListPurchasesResponseDTO]: Paginated purchase list
        """
        purchases, total = await self.purchase_repo.list_purchases(
            user_id=user_id,
            start=start,
            end=end,
            limit=limit,
            offset=offset,
        )

        lines_by_purchase = await self.purchase_repo.get_lines([p.id for p in purchases])
        products = await self.product_repo.get_by_ids(
            {line.product_id for lines in lines_by_purchase.values() for line in lines}
        )

        return Return.ok(
            ListPurchasesResponseDTO(
                purchases=[
                    PurchaseResponseDTO.from_entities(
                        purchase, lines_by_purchase.get(purchase.id, []), products
                    )
                    for purchase in purchases
                ],
                total=total,
                limit=limit,
                offset=offset,
            )
        )
