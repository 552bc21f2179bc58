"""PDF Generation Service Interface

Defines the contract for rendering purchase invoices.
"""

from abc import ABC, abstractmethod
from typing import Dict, List
from src.domain.product import Product
from src.domain.purchase import Purchase
from src.domain.purchase_line import PurchaseLine


class PdfService(ABC):
    """
    Service interface for PDF generation

    Provides PDF generation capabilities for purchase invoices.
    """

    @abstractmethod
    def generate_purchase_invoice(
        self,
        purchase: Purchase,
        lines: List[PurchaseLine],
        products: Dict[int, Product],
    ) -> bytes:
        """
        Generate an invoice PDF for a committed purchase

        Args:
            purchase: Purchase header
            lines: Purchase lines with frozen prices
            products: Products referenced by the lines, keyed by ID

        Returns:
            PDF document as bytes
        """
        pass
