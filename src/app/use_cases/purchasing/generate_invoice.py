"""GeneratePurchaseInvoice Use Case

Renders the invoice PDF of a committed purchase.
"""

from datetime import datetime
from typing import Optional
from src.libs.result import Result, Return, Error
from src.app.repositories.purchase_repository import PurchaseRepository
from src.app.repositories.product_repository import ProductRepository
from src.app.services.pdf_service import PdfService
from src.domain.exceptions import PurchaseError
from .dtos import PurchaseInvoiceDTO


class GeneratePurchaseInvoice:
    """
    Use Case: Generate purchase invoice PDF

    Business Rules:
    1. Purchase must exist and be visible to the caller
    2. The document shows the frozen line prices, never current catalog prices
    """

    def __init__(
        self,
        purchase_repo: PurchaseRepository,
        product_repo: ProductRepository,
        pdf_service: PdfService,
    ):
        self.purchase_repo = purchase_repo
        self.product_repo = product_repo
        self.pdf_service = pdf_service

    async def execute(self, purchase_id: int, user_id: Optional[int] = None) -> Result[PurchaseInvoiceDTO]:
        try:
            purchase = await self.purchase_repo.get_by_id(purchase_id)

            if not purchase or (user_id is not None and purchase.user_id != user_id):
                return Return.err(
                    Error(
                        code="PURCHASE_NOT_FOUND",
                        message=f"Purchase {purchase_id} not found",
                    )
                )

            lines = (await self.purchase_repo.get_lines([purchase.id])).get(purchase.id, [])
            products = await self.product_repo.get_by_ids({line.product_id for line in lines})

            pdf_bytes = self.pdf_service.generate_purchase_invoice(
                purchase=purchase,
                lines=lines,
                products=products,
            )

            return Return.ok(
                PurchaseInvoiceDTO(
                    purchase_id=purchase.id,
                    invoice_number=purchase.invoice_number,
                    pdf_bytes=pdf_bytes,
                    generated_at=datetime.utcnow(),
                )
            )

        except PurchaseError:
            # store failures keep their own code and retryability
            raise

        except Exception as e:
            return Return.err(
                Error(
                    code="GENERATE_INVOICE_FAILED",
                    message="Failed to generate invoice",
                    reason=str(e),
                )
            )
