"""SQLAlchemy Purchase Repository Implementation

Purchase record store using SQLAlchemy async session.
"""

from datetime import datetime
from typing import Dict, List, Optional, Tuple
from sqlmodel import select, func
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.purchase_repository import PurchaseRepository
from src.adapter.services.store_errors import translate_store_errors
from src.domain.purchase import Purchase
from src.domain.purchase_line import PurchaseLine


class SqlAlchemyPurchaseRepository(PurchaseRepository):
    """
    SQLAlchemy implementation of PurchaseRepository

    Uses async session for database operations. Writes are flushed, not
    committed; the unit of work owns the commit.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    @translate_store_errors
    async def create(self, purchase: Purchase) -> Purchase:
        """
        Insert a purchase header

        Args:
            purchase: Purchase entity to persist

        Returns:
            Created Purchase with generated ID
        """
        self.session.add(purchase)
        await self.session.flush()
        await self.session.refresh(purchase)
        return purchase

    @translate_store_errors
    async def add_lines(self, lines: List[PurchaseLine]) -> List[PurchaseLine]:
        self.session.add_all(lines)
        await self.session.flush()
        return lines

    @translate_store_errors
    async def get_by_id(self, purchase_id: int) -> Optional[Purchase]:
        statement = select(Purchase).where(Purchase.id == purchase_id)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    @translate_store_errors
    async def get_by_invoice_number(self, invoice_number: str) -> Optional[Purchase]:
        statement = select(Purchase).where(Purchase.invoice_number == invoice_number)
        result = await self.session.execute(statement)
        return result.scalar_one_or_none()

    @translate_store_errors
    async def invoice_number_exists(self, invoice_number: str) -> bool:
        statement = (
            select(func.count())
            .select_from(Purchase)
            .where(Purchase.invoice_number == invoice_number)
        )
        result = await self.session.execute(statement)
        return result.scalar_one() > 0

    @translate_store_errors
    async def get_lines(self, purchase_ids: List[int]) -> Dict[int, List[PurchaseLine]]:
        """
        Retrieve lines for several purchases in one query

        Args:
            purchase_ids: Purchase IDs

        Returns:
            Mapping of purchase ID to its lines (ordered by line ID)
        """
        lines_by_purchase: Dict[int, List[PurchaseLine]] = {
            purchase_id: [] for purchase_id in purchase_ids
        }
        if not purchase_ids:
            return lines_by_purchase

        statement = (
            select(PurchaseLine)
            .where(PurchaseLine.purchase_id.in_(purchase_ids))
            .order_by(PurchaseLine.id)
        )
        result = await self.session.execute(statement)
        for line in result.scalars().all():
            lines_by_purchase[line.purchase_id].append(line)
        return lines_by_purchase

    @translate_store_errors
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

        Returns:
            Tuple of (purchases, total matching count)
        """
        conditions = []
        if user_id is not None:
            conditions.append(Purchase.user_id == user_id)
        if start is not None:
            conditions.append(Purchase.purchased_at >= start)
        if end is not None:
            conditions.append(Purchase.purchased_at <= end)

        count_statement = select(func.count()).select_from(Purchase)
        statement = select(Purchase)
        if conditions:
            count_statement = count_statement.where(*conditions)
            statement = statement.where(*conditions)

        total = (await self.session.execute(count_statement)).scalar_one()

        statement = (
            statement
            .order_by(Purchase.purchased_at.desc(), Purchase.id.desc())
            .limit(limit)
            .offset(offset)
        )
        result = await self.session.execute(statement)
        return list(result.scalars().all()), total
