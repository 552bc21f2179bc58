"""Invoice Sequencer

Assigns invoice numbers that are verified unique against the purchase store
inside the active transaction.
"""

import asyncio
import logging
import secrets
import time
from typing import Callable, Optional
from src.app.repositories.purchase_repository import PurchaseRepository
from src.domain.exceptions import SequencingExhausted

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5


def generate_invoice_number(now: Optional[float] = None, prefix: str = "INV") -> str:
    """
    Build an invoice number candidate

    Format: {prefix}-{epoch milliseconds}-{NNN}, e.g. INV-1718035200123-042.
    The time part keeps numbers roughly chronological; the random suffix
    separates candidates drawn in the same millisecond. Uniqueness is checked
    by the caller, never assumed.

    Args:
        now: Epoch seconds (defaults to the current time)
        prefix: Invoice number prefix

    Returns:
        Candidate invoice number
    """
    timestamp_ms = int((time.time() if now is None else now) * 1000)
    return f"{prefix}-{timestamp_ms}-{secrets.randbelow(1000):03d}"


class InvoiceSequencer:
    """
    Bounded check-then-retry invoice number assignment

    Each attempt draws a fresh candidate and checks it against the store in
    the caller's transaction. After max_attempts collisions the purchase
    fails with SequencingExhausted; this component never retries further.
    """

    def __init__(
        self,
        purchase_repo: PurchaseRepository,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_delay: float = 0.01,
        prefix: str = "INV",
        generator: Callable[..., str] = generate_invoice_number,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.purchase_repo = purchase_repo
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.prefix = prefix
        self.generator = generator

    async def next_invoice_number(self) -> str:
        """
        Produce an invoice number not present in the store

        Returns:
            Unique invoice number

        Raises:
            SequencingExhausted: every attempt collided
        """
        for attempt in range(1, self.max_attempts + 1):
            candidate = self.generator(prefix=self.prefix)
            if not await self.purchase_repo.invoice_number_exists(candidate):
                return candidate

            logger.warning(
                f"Invoice number collision on {candidate} "
                f"(attempt {attempt}/{self.max_attempts})"
            )
            if attempt < self.max_attempts and self.retry_delay > 0:
                await asyncio.sleep(self.retry_delay)

        raise SequencingExhausted(self.max_attempts)
