"""Data Transfer Objects for Purchasing Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional
from pydantic import BaseModel, Field
from src.domain.product import Product
from src.domain.purchase import Purchase
from src.domain.purchase_line import PurchaseLine


class CartLineDTO(BaseModel):
    """
    One requested product and quantity

    Unconstrained here; ExecutePurchase validates the cart itself
    and reports VALIDATION_ERROR.
    """

    product_id: int = Field(..., description="Product identifier")
    quantity: int = Field(..., description="Requested units")


class PurchaseCommandDTO(BaseModel):
    """
    Command DTO for executing a purchase

    Used as input to ExecutePurchase use case. Carries no prices: unit
    prices and subtotals are always derived from the locked products.
    """

    user_id: int = Field(
        ...,
        description="Authenticated purchaser identifier"
    )

    items: List[CartLineDTO] = Field(
        ...,
        description="Cart lines in request order"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "user_id": 7,
                "items": [
                    {"product_id": 1, "quantity": 2},
                    {"product_id": 2, "quantity": 1},
                ],
            }
        }


class PurchaseLineDTO(BaseModel):
    id: int = Field(..., description="Line ID")
    product_id: int = Field(..., description="Product ID")
    product_name: Optional[str] = Field(default=None, description="Product name")
    lot_number: Optional[str] = Field(default=None, description="Product lot code")
    quantity: int = Field(..., description="Units purchased")
    unit_price: Decimal = Field(..., description="Unit price snapshot")
    subtotal: Decimal = Field(..., description="quantity * unit_price")


class PurchaseResponseDTO(BaseModel):
    """
    Response DTO for a committed purchase

    Returned by ExecutePurchase and GetPurchase.
    """

    purchase_id: int = Field(..., description="Purchase ID")
    user_id: int = Field(..., description="Purchaser ID")
    invoice_number: str = Field(..., description="Unique invoice number")
    status: str = Field(..., description="Purchase status")
    total_amount: Decimal = Field(..., description="Sum of line subtotals")
    purchased_at: datetime = Field(..., description="Transaction timestamp")
    lines: List[PurchaseLineDTO] = Field(..., description="Purchase lines")

    @classmethod
    def from_entities(
        cls,
        purchase: Purchase,
        lines: List[PurchaseLine],
        products: Optional[Dict[int, Product]] = None,
    ) -> "PurchaseResponseDTO":
        products = products or {}
        return cls(
            purchase_id=purchase.id,
            user_id=purchase.user_id,
            invoice_number=purchase.invoice_number,
            status=purchase.status.value if hasattr(purchase.status, "value") else purchase.status,
            total_amount=purchase.total_amount,
            purchased_at=purchase.purchased_at,
            lines=[
                PurchaseLineDTO(
                    id=line.id,
                    product_id=line.product_id,
                    product_name=products[line.product_id].name if line.product_id in products else None,
                    lot_number=products[line.product_id].lot_number if line.product_id in products else None,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    subtotal=line.subtotal,
                )
                for line in lines
            ],
        )

    class Config:
        json_schema_extra = {
            "example": {
                "purchase_id": 42,
                "user_id": 7,
                "invoice_number": "INV-1718035200123-042",
                "status": "completed",
                "total_amount": "25.00",
                "purchased_at": "2024-06-10T16:00:00Z",
                "lines": [
                    {
                        "id": 1,
                        "product_id": 1,
                        "product_name": "Paracetamol 500mg",
                        "lot_number": "LOT-2024-0001",
                        "quantity": 2,
                        "unit_price": "10.00",
                        "subtotal": "20.00",
                    },
                    {
                        "id": 2,
                        "product_id": 2,
                        "product_name": "Ibuprofen 400mg",
                        "lot_number": "LOT-2024-0002",
                        "quantity": 1,
                        "unit_price": "5.00",
                        "subtotal": "5.00",
                    },
                ],
            }
        }


class ListPurchasesResponseDTO(BaseModel):
    purchases: List[PurchaseResponseDTO] = Field(..., description="Purchases, most recent first")
    total: int = Field(..., description="Total matching purchases")
    limit: int = Field(..., description="Page size")
    offset: int = Field(..., description="Page offset")


class PurchaseInvoiceDTO(BaseModel):
    """Rendered invoice document for a purchase"""

    purchase_id: int = Field(..., description="Purchase ID")
    invoice_number: str = Field(..., description="Invoice number")
    pdf_bytes: bytes = Field(..., description="PDF document")
    generated_at: datetime = Field(..., description="Render timestamp")
