"""SQLAlchemy implementation of StockLedger

Row-level locking (SELECT ... FOR UPDATE) around the read-validate-decrement
sequence of a purchase.
"""

from datetime import datetime
from typing import Dict, Iterable
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.stock_ledger import StockLedger
from src.adapter.services.store_errors import translate_store_errors
from src.domain.exceptions import FatalStoreFailure, InsufficientStock, ProductsNotFound
from src.domain.product import Product


class SqlAlchemyStockLedger(StockLedger):
    """
    SQLAlchemy implementation of StockLedger

    Features:
    - Pessimistic locking via SELECT FOR UPDATE, ordered by id so two carts
      sharing products always lock them in the same order
    - Decrements only on rows this ledger locked
    - Changes flushed inside the caller's transaction, published on commit
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self._locked: Dict[int, Product] = {}

    @translate_store_errors
    async def lock_and_fetch(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        """
        Lock active products in ascending id order

        Args:
            product_ids: Product IDs to lock

        Returns:
            Mapping of product ID to locked Product

        Raises:
            ProductsNotFound: any ID missing or inactive
        """
        requested = sorted(set(product_ids))

        stmt = (
            select(Product)
            .where(Product.id.in_(requested))
            .where(Product.is_active == True)  # noqa: E712
            .order_by(Product.id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        products = {product.id: product for product in result.scalars().all()}

        missing = [product_id for product_id in requested if product_id not in products]
        if missing:
            raise ProductsNotFound(missing)

        self._locked.update(products)
        return products

    @translate_store_errors
    async def decrement(self, product_id: int, amount: int) -> int:
        """
        Decrement available quantity of a locked product

        Args:
            product_id: Locked product ID
            amount: Units to remove

        Returns:
            New available quantity

        Note:
            Must be called within the transaction that called lock_and_fetch
        """
        product = self._locked.get(product_id)
        if product is None:
            raise FatalStoreFailure(reason=f"decrement on product {product_id} without a lock")

        if amount > product.available_quantity:
            raise InsufficientStock(product_id, product.available_quantity, amount)

        product.available_quantity -= amount
        product.updated_at = datetime.utcnow()
        self.session.add(product)
        await self.session.flush()
        return product.available_quantity

    def release(self) -> None:
        self._locked.clear()
