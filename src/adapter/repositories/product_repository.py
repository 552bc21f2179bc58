"""SQLAlchemy Product Repository Implementation

Plain catalog reads, no locking.
"""

from typing import Dict, Iterable
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.repositories.product_repository import ProductRepository
from src.adapter.services.store_errors import translate_store_errors
from src.domain.product import Product


class SqlAlchemyProductRepository(ProductRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    @translate_store_errors
    async def get_by_ids(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        ids = list(set(product_ids))
        if not ids:
            return {}
        statement = select(Product).where(Product.id.in_(ids))
        result = await self.session.execute(statement)
        return {product.id: product for product in result.scalars().all()}
