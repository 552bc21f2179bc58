"""Get Purchase Use Case

Read-back of a committed purchase with its lines.
"""

from typing import Optional
from src.libs.result import Result, Return, Error
from src.app.repositories.purchase_repository import PurchaseRepository
from src.app.repositories.product_repository import ProductRepository
from .dtos import PurchaseResponseDTO


class GetPurchase:
    """
    Get Purchase Use Case

    Returns the purchase exactly as committed: total, invoice number and the
    frozen line prices. When user_id is given the purchase must belong to
    that user; otherwise it is reported as not found.
    """

    def __init__(self, purchase_repo: PurchaseRepository, product_repo: ProductRepository):
        self.purchase_repo = purchase_repo
        self.product_repo = product_repo

    async def execute(self, purchase_id: int, user_id: Optional[int] = None) -> Result[PurchaseResponseDTO]:
        """
        Args:
            purchase_id: Purchase identifier
            user_id: Restrict to this purchaser (None for admins)

        Errors:
            PURCHASE_NOT_FOUND: no such purchase visible to the caller
        """
        purchase = await self.purchase_repo.get_by_id(purchase_id)

        if not purchase or (user_id is not None and purchase.user_id != user_id):
            return Return.err(
                Error(
                    code="PURCHASE_NOT_FOUND",
                    message=f"Purchase {purchase_id} not found",
                )
            )

        lines = (await self.purchase_repo.get_lines([purchase.id])).get(purchase.id, [])
        products = await self.product_repo.get_by_ids({line.product_id for line in lines})

        return Return.ok(PurchaseResponseDTO.from_entities(purchase, lines, products))
