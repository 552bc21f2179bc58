"""Purchasing use cases"""
from .execute_purchase import (
    ExecutePurchase,
    PurchaseState,
    PricedLine,
    validate_cart,
    compute_subtotal,
    price_cart,
)
from .get_purchase import GetPurchase
from .list_purchases import ListPurchases
from .generate_invoice import GeneratePurchaseInvoice
from .dtos import (
    CartLineDTO,
    PurchaseCommandDTO,
    PurchaseLineDTO,
    PurchaseResponseDTO,
    ListPurchasesResponseDTO,
    PurchaseInvoiceDTO,
)

__all__ = [
    "ExecutePurchase",
    "PurchaseState",
    "PricedLine",
    "validate_cart",
    "compute_subtotal",
    "price_cart",
    "GetPurchase",
    "ListPurchases",
    "GeneratePurchaseInvoice",
    "CartLineDTO",
    "PurchaseCommandDTO",
    "PurchaseLineDTO",
    "PurchaseResponseDTO",
    "ListPurchasesResponseDTO",
    "PurchaseInvoiceDTO",
]
