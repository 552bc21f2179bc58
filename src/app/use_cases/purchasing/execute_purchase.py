"""ExecutePurchase Use Case

Turns a cart into a committed purchase, or into a typed failure with no
side effects, while other purchases run concurrently against the same
products.
"""

import asyncio
import logging
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Dict, List, NamedTuple, Sequence, Tuple
from src.libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.invoice_sequencer import InvoiceSequencer
from src.app.repositories.stock_ledger import StockLedger
from src.app.repositories.purchase_repository import PurchaseRepository
from src.domain.exceptions import (
    PurchaseError,
    CartValidationError,
    InsufficientStock,
    FatalStoreFailure,
)
from src.domain.product import Product
from src.domain.purchase import Purchase, PurchaseStatus
from src.domain.purchase_line import PurchaseLine
from .dtos import CartLineDTO, PurchaseCommandDTO, PurchaseResponseDTO

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


class PurchaseState(str, Enum):
    """Progress of one purchase transaction"""
    STARTED = "started"
    PRODUCTS_LOCKED = "products_locked"
    VALIDATED = "validated"
    PRICED = "priced"
    INVOICED = "invoiced"
    PERSISTED = "persisted"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class PricedLine(NamedTuple):
    product_id: int
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


def validate_cart(items: Sequence[CartLineDTO]) -> None:
    """
    Reject malformed carts before any transaction work

    Raises:
        CartValidationError: empty cart, non-positive id or quantity,
            or a product listed twice
    """
    errors = []
    if not items:
        errors.append("Cart must contain at least one product")

    seen = set()
    for index, item in enumerate(items):
        if item.product_id <= 0:
            errors.append(f"items[{index}].product_id must be greater than 0")
        if item.quantity <= 0:
            errors.append(f"items[{index}].quantity must be greater than 0")
        if item.product_id in seen:
            errors.append(f"items[{index}].product_id {item.product_id} is duplicated")
        seen.add(item.product_id)

    if errors:
        raise CartValidationError(errors)


def compute_subtotal(quantity: int, unit_price: Decimal) -> Decimal:
    """quantity * unit_price rounded half-up to cents"""
    return (Decimal(quantity) * Decimal(unit_price)).quantize(CENT, rounding=ROUND_HALF_UP)


def price_cart(
    items: Sequence[CartLineDTO], products: Dict[int, Product]
) -> Tuple[List[PricedLine], Decimal]:
    """
    Snapshot unit prices from the locked products and total the cart

    Returns:
        Tuple of (priced lines in cart order, total)
    """
    priced = []
    total = Decimal("0.00")
    for item in items:
        unit_price = Decimal(products[item.product_id].unit_price).quantize(CENT, rounding=ROUND_HALF_UP)
        subtotal = compute_subtotal(item.quantity, unit_price)
        priced.append(PricedLine(item.product_id, item.quantity, unit_price, subtotal))
        total += subtotal
    return priced, total


class ExecutePurchase:
    """
    Use Case: Execute a purchase

    Business Rules:
    1. All-or-nothing: a cart is never partially fulfilled
    2. Row locks on the cart's products only, taken in ascending id order
    3. Prices come from the locked products, never from the caller
    4. Exactly one invoice number is assigned, before the header is written
    5. Any failure rolls back every write and every decrement

    Flow:
    1. Validate cart shape
    2. Lock products (SELECT FOR UPDATE)
    3. Validate stock for every line
    4. Price lines and total
    5. Assign invoice number
    6. Write purchase header and lines, decrement stock
    7. Commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        stock_ledger: StockLedger,
        purchase_repo: PurchaseRepository,
        invoice_sequencer: InvoiceSequencer,
    ):
        self.uow = uow
        self.stock_ledger = stock_ledger
        self.purchase_repo = purchase_repo
        self.invoice_sequencer = invoice_sequencer

    async def execute(self, command: PurchaseCommandDTO) -> Result[PurchaseResponseDTO]:
        """
        Execute the purchase transaction

        Args:
            command: PurchaseCommandDTO with user_id and cart items

        Returns:
            Result[PurchaseResponseDTO]: committed purchase or a typed error
            (VALIDATION_ERROR, PRODUCTS_NOT_FOUND, INSUFFICIENT_STOCK,
            SEQUENCING_EXHAUSTED, TRANSIENT_STORE_FAILURE, FATAL_STORE_FAILURE)
        """
        try:
            validate_cart(command.items)
        except CartValidationError as e:
            logger.info(f"Rejected cart for user {command.user_id}: {e.errors}")
            return Return.err(e.to_error())

        state = PurchaseState.STARTED
        logger.info(
            f"Starting purchase for user {command.user_id} with {len(command.items)} products"
        )

        try:
            # Step 1: Lock products
            products = await self.stock_ledger.lock_and_fetch(
                [item.product_id for item in command.items]
            )
            state = PurchaseState.PRODUCTS_LOCKED

            # Step 2: Validate stock, first short line fails the cart
            for item in command.items:
                product = products[item.product_id]
                if not product.has_stock(item.quantity):
                    raise InsufficientStock(item.product_id, product.available_quantity, item.quantity)
            state = PurchaseState.VALIDATED

            # Step 3: Price
            priced_lines, total = price_cart(command.items, products)
            state = PurchaseState.PRICED

            # Step 4: Invoice number
            invoice_number = await self.invoice_sequencer.next_invoice_number()
            state = PurchaseState.INVOICED
            logger.info(f"Invoice number assigned: {invoice_number}")

            # Step 5: Persist header, lines and decrements
            purchase = await self.purchase_repo.create(
                Purchase(
                    user_id=command.user_id,
                    total_amount=total,
                    status=PurchaseStatus.COMPLETED,
                    invoice_number=invoice_number,
                )
            )
            lines = await self.purchase_repo.add_lines(
                [
                    PurchaseLine(
                        purchase_id=purchase.id,
                        product_id=line.product_id,
                        quantity=line.quantity,
                        unit_price=line.unit_price,
                        subtotal=line.subtotal,
                    )
                    for line in priced_lines
                ]
            )
            for line in priced_lines:
                remaining = await self.stock_ledger.decrement(line.product_id, line.quantity)
                logger.info(f"Stock updated for product {line.product_id}: {remaining} remaining")
            state = PurchaseState.PERSISTED

            # Step 6: Commit
            await self.uow.commit()
            state = PurchaseState.COMMITTED

        except PurchaseError as e:
            await self.uow.rollback()
            logger.warning(
                f"Purchase for user {command.user_id} {state.value} -> "
                f"{PurchaseState.ROLLED_BACK.value}: "
                f"{e.code} {e.message}" + (f" ({e.reason})" if e.reason else "")
            )
            return Return.err(e.to_error())

        except asyncio.CancelledError:
            await asyncio.shield(self.uow.rollback())
            logger.warning(f"Purchase for user {command.user_id} cancelled after {state.value}")
            raise

        except Exception as e:
            await self.uow.rollback()
            logger.exception(
                f"Purchase for user {command.user_id} {state.value} -> "
                f"{PurchaseState.ROLLED_BACK.value}: unexpected error"
            )
            return Return.err(FatalStoreFailure(reason=str(e)).to_error())

        finally:
            self.stock_ledger.release()

        logger.info(
            f"Purchase completed: {purchase.invoice_number} for user {command.user_id} "
            f"- Total: {purchase.total_amount}"
        )
        return Return.ok(PurchaseResponseDTO.from_entities(purchase, lines, products))
