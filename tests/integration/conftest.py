import os
import pytest_asyncio
from decimal import Decimal
from httpx import ASGITransport, AsyncClient
from sqlmodel import SQLModel, select
from src.adapter.repositories.purchase_repository import SqlAlchemyPurchaseRepository
from src.adapter.repositories.stock_ledger import SqlAlchemyStockLedger
from src.adapter.services.database import build_engine, build_session_factory
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.app.services.invoice_sequencer import InvoiceSequencer
from src.app.use_cases.purchasing.execute_purchase import ExecutePurchase
from src.depends import get_session
from src.domain import Product, User, UserRole


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create test database engine

    File-backed SQLite by default so that concurrent sessions really contend
    for the database lock; set TEST_DB_URI to run against PostgreSQL.
    """
    test_db_url = os.environ.get("TEST_DB_URI") or f"sqlite+aiosqlite:///{tmp_path / 'purchases_test.db'}"

    engine = build_engine(test_db_url, lock_timeout_ms=5000)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seed(db_session):
    """
    Users and products shared by the purchase tests

    Returns plain ids so tests never touch expired instances.
    """
    customer = User(name="Ana Customer", email="ana@example.com", role=UserRole.CUSTOMER)
    other_customer = User(name="Bo Customer", email="bo@example.com", role=UserRole.CUSTOMER)
    admin = User(name="Cy Admin", email="cy@example.com", role=UserRole.ADMIN)
    inactive = User(name="Di Gone", email="di@example.com", is_active=False)

    product_a = Product(
        lot_number="LOT-A", name="Product A", unit_price=Decimal("10.00"), available_quantity=5
    )
    product_b = Product(
        lot_number="LOT-B", name="Product B", unit_price=Decimal("5.00"), available_quantity=5
    )
    product_c = Product(
        lot_number="LOT-C", name="Product C", unit_price=Decimal("3.00"), available_quantity=10,
        is_active=False,
    )

    db_session.add_all([customer, other_customer, admin, inactive, product_a, product_b, product_c])
    await db_session.commit()

    return {
        "customer": customer.id,
        "other_customer": other_customer.id,
        "admin": admin.id,
        "inactive": inactive.id,
        "product_a": product_a.id,
        "product_b": product_b.id,
        "inactive_product": product_c.id,
    }


@pytest_asyncio.fixture
def purchase_executor():
    """Builds an ExecutePurchase wired to one session"""

    def build(session):
        purchase_repo = SqlAlchemyPurchaseRepository(session)
        return ExecutePurchase(
            uow=SqlAlchemyUnitOfWork(session),
            stock_ledger=SqlAlchemyStockLedger(session),
            purchase_repo=purchase_repo,
            invoice_sequencer=InvoiceSequencer(purchase_repo, retry_delay=0),
        )

    return build


@pytest_asyncio.fixture
def stock_of():
    """Reads a product's available quantity without loading the entity"""

    async def read(session, product_id):
        result = await session.execute(
            select(Product.available_quantity).where(Product.id == product_id)
        )
        return result.scalar_one()

    return read


@pytest_asyncio.fixture
async def client(db_session):
    """Create test client with database session override"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
