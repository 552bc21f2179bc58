from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.adapter.services.database import build_engine, build_session_factory

engine = build_engine(ApplicationConfig.DB_URI, lock_timeout_ms=ApplicationConfig.LOCK_TIMEOUT_MS)

AsyncSessionLocal = build_session_factory(engine)


async def get_session() -> AsyncSession:
    """One session per request; caller identity and the purchase share it"""
    async with AsyncSessionLocal() as session:
        yield session
