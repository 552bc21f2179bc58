"""Unit tests for ExecutePurchase use case

Tests cover:
- Successful multi-product purchase (2 x 10.00 + 1 x 5.00 = 25.00)
- Insufficient stock on any line fails the whole cart
- Missing or inactive products
- Cart validation before any transaction work
- Invoice sequencing exhaustion
- Store failures (transient, fatal, unexpected) and rollback
"""

import asyncio
import pytest
from datetime import datetime
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.app.use_cases.purchasing.execute_purchase import ExecutePurchase
from src.app.use_cases.purchasing.dtos import CartLineDTO, PurchaseCommandDTO
from src.domain.exceptions import (
    ProductsNotFound,
    SequencingExhausted,
    TransientStoreFailure,
    FatalStoreFailure,
)
from src.domain.product import Product
from src.domain.purchase import Purchase, PurchaseStatus


@pytest.fixture
def products():
    """Product A (10.00, 5 units) and product B (5.00, 5 units)"""
    return {
        1: Product(
            id=1,
            lot_number="LOT-A",
            name="Product A",
            unit_price=Decimal("10.00"),
            available_quantity=5,
        ),
        2: Product(
            id=2,
            lot_number="LOT-B",
            name="Product B",
            unit_price=Decimal("5.00"),
            available_quantity=5,
        ),
    }


@pytest.fixture
def mock_stock_ledger(products):
    ledger = MagicMock()
    ledger.lock_and_fetch = AsyncMock(return_value=products)

    async def decrement(product_id, amount):
        products[product_id].available_quantity -= amount
        return products[product_id].available_quantity

    ledger.decrement = AsyncMock(side_effect=decrement)
    ledger.release = MagicMock()
    return ledger


@pytest.fixture
def mock_purchase_repo():
    repo = MagicMock()

    async def create(purchase):
        purchase.id = 42
        return purchase

    async def add_lines(lines):
        for index, line in enumerate(lines, start=1):
            line.id = index
        return lines

    repo.create = AsyncMock(side_effect=create)
    repo.add_lines = AsyncMock(side_effect=add_lines)
    return repo


@pytest.fixture
def mock_sequencer():
    sequencer = MagicMock()
    sequencer.next_invoice_number = AsyncMock(return_value="INV-1718035200123-042")
    return sequencer


@pytest.fixture
def purchase_use_case(mock_uow, mock_stock_ledger, mock_purchase_repo, mock_sequencer):
    return ExecutePurchase(
        uow=mock_uow,
        stock_ledger=mock_stock_ledger,
        purchase_repo=mock_purchase_repo,
        invoice_sequencer=mock_sequencer,
    )


def cart(*lines):
    return PurchaseCommandDTO(
        user_id=7,
        items=[CartLineDTO(product_id=pid, quantity=qty) for pid, qty in lines],
    )


@pytest.mark.asyncio
class TestExecutePurchaseSuccess:
    async def test_two_products_total_and_decrements(
        self, purchase_use_case, mock_uow, mock_stock_ledger, mock_purchase_repo, products
    ):
        """
        Given: A at 10.00 and B at 5.00, 5 units each
        When: 2 x A and 1 x B are purchased
        Then: total 25.00, A 5 -> 3, B 5 -> 4, committed once
        """
        result = await purchase_use_case.execute(cart((1, 2), (2, 1)))

        assert result.is_ok()
        response = result.value
        assert response.purchase_id == 42
        assert response.user_id == 7
        assert response.invoice_number == "INV-1718035200123-042"
        assert response.status == "completed"
        assert response.total_amount == Decimal("25.00")
        assert [line.subtotal for line in response.lines] == [Decimal("20.00"), Decimal("5.00")]
        assert [line.product_name for line in response.lines] == ["Product A", "Product B"]

        assert products[1].available_quantity == 3
        assert products[2].available_quantity == 4

        mock_stock_ledger.lock_and_fetch.assert_called_once_with([1, 2])
        assert mock_stock_ledger.decrement.call_count == 2
        mock_uow.commit.assert_called_once()
        mock_uow.rollback.assert_not_called()
        mock_stock_ledger.release.assert_called_once()

    async def test_header_written_with_invoice_number_and_total(
        self, purchase_use_case, mock_purchase_repo
    ):
        await purchase_use_case.execute(cart((1, 2), (2, 1)))

        purchase = mock_purchase_repo.create.call_args.args[0]
        assert isinstance(purchase, Purchase)
        assert purchase.invoice_number == "INV-1718035200123-042"
        assert purchase.total_amount == Decimal("25.00")
        assert purchase.status == PurchaseStatus.COMPLETED
        assert purchase.user_id == 7

        lines = mock_purchase_repo.add_lines.call_args.args[0]
        assert all(line.purchase_id == 42 for line in lines)
        assert [(l.product_id, l.quantity, l.unit_price) for l in lines] == [
            (1, 2, Decimal("10.00")),
            (2, 1, Decimal("5.00")),
        ]

    async def test_invoice_assigned_once(self, purchase_use_case, mock_sequencer):
        await purchase_use_case.execute(cart((1, 1)))

        mock_sequencer.next_invoice_number.assert_called_once()

    async def test_lines_keep_cart_order(self, purchase_use_case):
        result = await purchase_use_case.execute(cart((2, 1), (1, 1)))

        assert result.is_ok()
        assert [line.product_id for line in result.value.lines] == [2, 1]
        assert result.value.total_amount == Decimal("15.00")


@pytest.mark.asyncio
class TestExecutePurchaseBusinessFailures:
    async def test_insufficient_stock_fails_whole_cart(
        self, purchase_use_case, mock_uow, mock_stock_ledger, mock_purchase_repo, mock_sequencer, products
    ):
        """
        Given: A has 3 units
        When: 10 x A are requested alongside B
        Then: INSUFFICIENT_STOCK(A, 3, 10), nothing written, stock unchanged
        """
        products[1].available_quantity = 3

        result = await purchase_use_case.execute(cart((1, 10), (2, 1)))

        assert result.is_err()
        assert result.error.code == "INSUFFICIENT_STOCK"
        assert result.error.details == {"product_id": 1, "available": 3, "requested": 10}
        assert result.error.retryable is False

        mock_sequencer.next_invoice_number.assert_not_called()
        mock_purchase_repo.create.assert_not_called()
        mock_stock_ledger.decrement.assert_not_called()
        mock_uow.commit.assert_not_called()
        mock_uow.rollback.assert_called_once()
        mock_stock_ledger.release.assert_called_once()
        assert products[1].available_quantity == 3
        assert products[2].available_quantity == 5

    async def test_first_short_line_is_reported(self, purchase_use_case, products):
        products[1].available_quantity = 0
        products[2].available_quantity = 0

        result = await purchase_use_case.execute(cart((2, 1), (1, 1)))

        assert result.error.code == "INSUFFICIENT_STOCK"
        assert result.error.details["product_id"] == 2

    async def test_products_not_found(self, purchase_use_case, mock_uow, mock_stock_ledger, mock_purchase_repo):
        mock_stock_ledger.lock_and_fetch = AsyncMock(side_effect=ProductsNotFound([99]))

        result = await purchase_use_case.execute(cart((1, 1), (99, 1)))

        assert result.is_err()
        assert result.error.code == "PRODUCTS_NOT_FOUND"
        assert result.error.details == {"missing_ids": [99]}
        mock_purchase_repo.create.assert_not_called()
        mock_uow.rollback.assert_called_once()

    async def test_sequencing_exhausted(
        self, purchase_use_case, mock_uow, mock_sequencer, mock_purchase_repo, mock_stock_ledger
    ):
        mock_sequencer.next_invoice_number = AsyncMock(side_effect=SequencingExhausted(5))

        result = await purchase_use_case.execute(cart((1, 1)))

        assert result.is_err()
        assert result.error.code == "SEQUENCING_EXHAUSTED"
        assert result.error.details == {"attempts": 5}
        mock_purchase_repo.create.assert_not_called()
        mock_stock_ledger.decrement.assert_not_called()
        mock_uow.rollback.assert_called_once()


@pytest.mark.asyncio
class TestExecutePurchaseValidation:
    @pytest.mark.parametrize(
        "lines",
        [
            [],
            [(1, 0)],
            [(1, -2)],
            [(0, 1)],
            [(1, 1), (1, 2)],
        ],
    )
    async def test_invalid_cart_rejected_before_locking(
        self, purchase_use_case, mock_uow, mock_stock_ledger, lines
    ):
        result = await purchase_use_case.execute(cart(*lines))

        assert result.is_err()
        assert result.error.code == "VALIDATION_ERROR"
        assert result.error.details["errors"]
        mock_stock_ledger.lock_and_fetch.assert_not_called()
        mock_uow.commit.assert_not_called()


@pytest.mark.asyncio
class TestExecutePurchaseStoreFailures:
    async def test_transient_failure_is_retryable(self, purchase_use_case, mock_uow, mock_stock_ledger):
        mock_stock_ledger.lock_and_fetch = AsyncMock(
            side_effect=TransientStoreFailure(reason="canceling statement due to lock timeout")
        )

        result = await purchase_use_case.execute(cart((1, 1)))

        assert result.is_err()
        assert result.error.code == "TRANSIENT_STORE_FAILURE"
        assert result.error.retryable is True
        assert "lock timeout" not in result.error.message
        mock_uow.rollback.assert_called_once()

    async def test_commit_failure_rolls_back(self, purchase_use_case, mock_uow):
        mock_uow.commit = AsyncMock(side_effect=FatalStoreFailure(reason="disk I/O error"))

        result = await purchase_use_case.execute(cart((1, 1)))

        assert result.is_err()
        assert result.error.code == "FATAL_STORE_FAILURE"
        assert result.error.retryable is False
        mock_uow.rollback.assert_called_once()

    async def test_unexpected_exception_is_fatal(self, purchase_use_case, mock_uow, mock_purchase_repo):
        mock_purchase_repo.create = AsyncMock(side_effect=RuntimeError("boom"))

        result = await purchase_use_case.execute(cart((1, 1)))

        assert result.is_err()
        assert result.error.code == "FATAL_STORE_FAILURE"
        assert result.error.message == "The purchase could not be processed"
        assert result.error.reason == "boom"
        mock_uow.commit.assert_not_called()
        mock_uow.rollback.assert_called_once()

    async def test_cancellation_rolls_back_and_propagates(self, purchase_use_case, mock_uow, mock_stock_ledger):
        mock_stock_ledger.lock_and_fetch = AsyncMock(side_effect=asyncio.CancelledError())

        with pytest.raises(asyncio.CancelledError):
            await purchase_use_case.execute(cart((1, 1)))

        mock_uow.rollback.assert_called_once()
        mock_stock_ledger.release.assert_called_once()

    async def test_rollback_finishes_when_cancelled_again(self, purchase_use_case, mock_uow, mock_stock_ledger):
        """A second cancel while rolling back does not abandon the rollback"""
        rollback_started = asyncio.Event()
        release_rollback = asyncio.Event()
        rolled_back = []

        async def slow_rollback():
            rollback_started.set()
            await release_rollback.wait()
            rolled_back.append(True)

        mock_uow.rollback = AsyncMock(side_effect=slow_rollback)
        mock_stock_ledger.lock_and_fetch = AsyncMock(side_effect=asyncio.CancelledError())

        task = asyncio.create_task(purchase_use_case.execute(cart((1, 1))))
        await rollback_started.wait()
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        release_rollback.set()
        for _ in range(5):
            await asyncio.sleep(0)

        assert rolled_back == [True]
