from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.unit_of_work import UnitOfWork
from src.adapter.services.store_errors import translate_store_errors


class SqlAlchemyUnitOfWork(UnitOfWork):
    """
    Transaction boundary over one AsyncSession

    Repositories sharing the session only flush; the purchase becomes visible
    here. A failed commit surfaces as TransientStoreFailure or
    FatalStoreFailure.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    @translate_store_errors
    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()
