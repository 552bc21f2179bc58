"""Integration tests for purchase read paths"""

import pytest
from datetime import datetime, timedelta
from decimal import Decimal

from src.adapter.repositories.product_repository import SqlAlchemyProductRepository
from src.adapter.repositories.purchase_repository import SqlAlchemyPurchaseRepository
from src.app.use_cases.purchasing.list_purchases import ListPurchases
from src.domain import Purchase, PurchaseLine


async def add_purchase(session, user_id, product_id, invoice_number, purchased_at, quantity=1):
    purchase = Purchase(
        user_id=user_id,
        purchased_at=purchased_at,
        total_amount=Decimal("10.00") * quantity,
        invoice_number=invoice_number,
    )
    session.add(purchase)
    await session.flush()
    session.add(
        PurchaseLine(
            purchase_id=purchase.id,
            product_id=product_id,
            quantity=quantity,
            unit_price=Decimal("10.00"),
            subtotal=Decimal("10.00") * quantity,
        )
    )
    await session.commit()
    return purchase.id


@pytest.fixture
def now():
    return datetime(2024, 6, 10, 12, 0, 0)


@pytest.mark.asyncio
class TestPurchaseQueries:
    async def test_filters_by_user_and_orders_most_recent_first(self, db_session, seed, now):
        a = seed["product_a"]
        oldest = await add_purchase(db_session, seed["customer"], a, "INV-1-001", now - timedelta(days=2))
        newest = await add_purchase(db_session, seed["customer"], a, "INV-1-002", now)
        await add_purchase(db_session, seed["other_customer"], a, "INV-1-003", now - timedelta(days=1))

        purchases, total = await SqlAlchemyPurchaseRepository(db_session).list_purchases(user_id=seed["customer"])

        assert total == 2
        assert [p.id for p in purchases] == [newest, oldest]

    async def test_date_range_is_inclusive(self, db_session, seed, now):
        a = seed["product_a"]
        await add_purchase(db_session, seed["customer"], a, "INV-1-001", now - timedelta(days=10))
        inside = await add_purchase(db_session, seed["customer"], a, "INV-1-002", now - timedelta(days=1))
        edge = await add_purchase(db_session, seed["customer"], a, "INV-1-003", now)

        purchases, total = await SqlAlchemyPurchaseRepository(db_session).list_purchases(
            start=now - timedelta(days=2), end=now
        )

        assert total == 2
        assert {p.id for p in purchases} == {inside, edge}

    async def test_pagination_reports_full_total(self, db_session, seed, now):
        a = seed["product_a"]
        for i in range(5):
            await add_purchase(db_session, seed["customer"], a, f"INV-1-00{i}", now - timedelta(hours=i))

        purchases, total = await SqlAlchemyPurchaseRepository(db_session).list_purchases(limit=2, offset=2)

        assert total == 5
        assert [p.invoice_number for p in purchases] == ["INV-1-002", "INV-1-003"]

    async def test_invoice_number_exists(self, db_session, seed, now):
        await add_purchase(db_session, seed["customer"], seed["product_a"], "INV-1-001", now)
        repo = SqlAlchemyPurchaseRepository(db_session)

        assert await repo.invoice_number_exists("INV-1-001") is True
        assert await repo.invoice_number_exists("INV-1-999") is False

    async def test_get_lines_for_several_purchases(self, db_session, seed, now):
        a = seed["product_a"]
        first = await add_purchase(db_session, seed["customer"], a, "INV-1-001", now, quantity=2)
        second = await add_purchase(db_session, seed["customer"], a, "INV-1-002", now)

        lines = await SqlAlchemyPurchaseRepository(db_session).get_lines([first, second, 12345])

        assert [l.quantity for l in lines[first]] == [2]
        assert [l.quantity for l in lines[second]] == [1]
        assert lines[12345] == []

    async def test_list_use_case_includes_product_names(self, db_session, seed, now):
        await add_purchase(db_session, seed["customer"], seed["product_a"], "INV-1-001", now)

        result = await ListPurchases(
            SqlAlchemyPurchaseRepository(db_session), SqlAlchemyProductRepository(db_session)
        ).execute(user_id=seed["customer"])

        assert result.is_ok()
        assert result.value.total == 1
        assert result.value.purchases[0].lines[0].product_name == "Product A"
