"""Purchase API Routes

FastAPI routes for executing purchases, reading them back and downloading
their invoices.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.api.auth import get_current_customer, get_current_user
from src.api.error import ClientError, to_client_error
from src.api.schemas.purchase_request import PurchaseRequestSchema, parse_date_bound
from src.app.services.invoice_sequencer import InvoiceSequencer
from src.app.use_cases.purchasing.dtos import (
    CartLineDTO,
    ListPurchasesResponseDTO,
    PurchaseCommandDTO,
    PurchaseResponseDTO,
)
from src.app.use_cases.purchasing.execute_purchase import ExecutePurchase
from src.app.use_cases.purchasing.generate_invoice import GeneratePurchaseInvoice
from src.app.use_cases.purchasing.get_purchase import GetPurchase
from src.app.use_cases.purchasing.list_purchases import ListPurchases
from src.adapter.repositories.product_repository import SqlAlchemyProductRepository
from src.adapter.repositories.purchase_repository import SqlAlchemyPurchaseRepository
from src.adapter.repositories.stock_ledger import SqlAlchemyStockLedger
from src.adapter.services.pdf_service import ReportLabPdfService
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from src.depends import get_session
from src.domain.user import User, UserRole
from src.libs.result import Error

router = APIRouter(prefix="/purchases", tags=["Purchases"])


def scope_for(user: User) -> Optional[int]:
    """Admins see every purchase, customers only their own"""
    return None if user.role == UserRole.ADMIN else user.id


@router.post(
    "",
    response_model=PurchaseResponseDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {
            "description": "Product not found or inactive",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "PRODUCTS_NOT_FOUND",
                            "message": "Products not found or inactive: 99",
                            "details": {"missing_ids": [99]},
                            "retryable": False
                        }
                    }
                }
            }
        },
        409: {
            "description": "Insufficient stock",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INSUFFICIENT_STOCK",
                            "message": "Insufficient stock for product 1. Available: 3, Requested: 10",
                            "details": {"product_id": 1, "available": 3, "requested": 10},
                            "retryable": False
                        }
                    }
                }
            }
        },
        503: {
            "description": "Store busy (lock timeout or deadlock), retry the purchase",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "TRANSIENT_STORE_FAILURE",
                            "message": "The system is busy, please try again in a few seconds",
                            "details": None,
                            "retryable": True
                        }
                    }
                }
            }
        }
    }
)
async def create_purchase(
    request: PurchaseRequestSchema,
    user: User = Depends(get_current_customer),
    session: AsyncSession = Depends(get_session)
):
    """
    Execute an all-or-nothing purchase of several products.

    Locks the requested products, validates stock for every line, prices the
    cart from current product prices, assigns a unique invoice number and
    commits header, lines and stock decrements together.

    **Request body:**
    - `items` (required): List of `{product_id, quantity}`, at least one,
      each product at most once

    **Returns:**
    - 201: Purchase committed
    - 400: Invalid cart
    - 401: Unknown caller
    - 403: Caller is not a customer
    - 404: Product missing or inactive
    - 409: Insufficient stock
    - 503: Store busy, safe to retry
    """
    purchase_repo = SqlAlchemyPurchaseRepository(session)
    sequencer = InvoiceSequencer(
        purchase_repo,
        max_attempts=ApplicationConfig.INVOICE_MAX_ATTEMPTS,
        retry_delay=ApplicationConfig.INVOICE_RETRY_DELAY_MS / 1000,
        prefix=ApplicationConfig.INVOICE_PREFIX,
    )

    use_case = ExecutePurchase(
        uow=SqlAlchemyUnitOfWork(session),
        stock_ledger=SqlAlchemyStockLedger(session),
        purchase_repo=purchase_repo,
        invoice_sequencer=sequencer,
    )
    command = PurchaseCommandDTO(
        user_id=user.id,
        items=[CartLineDTO(product_id=item.product_id, quantity=item.quantity) for item in request.items],
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise to_client_error(result.error)

    return result.value


@router.get(
    "",
    response_model=ListPurchasesResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_purchases(
    start_date: Optional[str] = Query(
        default=None, description="Inclusive lower bound: ISO date (whole day) or datetime"
    ),
    end_date: Optional[str] = Query(
        default=None, description="Inclusive upper bound: ISO date (whole day) or datetime"
    ),
    user_id: Optional[int] = Query(default=None, description="Purchaser filter (admins only)"),
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """
    List purchases, most recent first.

    Customers only ever see their own purchases; admins see every purchase and
    may filter by `user_id`.
    """
    try:
        start = parse_date_bound(start_date)
        end = parse_date_bound(end_date, end=True)
    except ValueError as e:
        raise ClientError(
            Error(code="VALIDATION_ERROR", message=str(e)),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    if start and end and start > end:
        raise ClientError(
            Error(code="VALIDATION_ERROR", message="start_date must be before end_date"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    owner_id = scope_for(user)
    if owner_id is None:
        owner_id = user_id

    use_case = ListPurchases(SqlAlchemyPurchaseRepository(session), SqlAlchemyProductRepository(session))
    result = await use_case.execute(
        user_id=owner_id,
        start=start,
        end=end,
        limit=limit,
        offset=offset,
    )

    if result.is_err():
        raise to_client_error(result.error)

    return result.value


@router.get(
    "/{purchase_id}",
    response_model=PurchaseResponseDTO,
    status_code=status.HTTP_200_OK,
    responses={
        404: {
            "description": "Purchase not found",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "PURCHASE_NOT_FOUND",
                            "message": "Purchase 123 not found",
                            "details": None,
                            "retryable": False
                        }
                    }
                }
            }
        }
    }
)
async def get_purchase(
    purchase_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """Read back a committed purchase with its lines."""
    use_case = GetPurchase(SqlAlchemyPurchaseRepository(session), SqlAlchemyProductRepository(session))
    result = await use_case.execute(purchase_id, user_id=scope_for(user))

    if result.is_err():
        raise to_client_error(result.error)

    return result.value


@router.get(
    "/{purchase_id}/invoice/pdf",
    responses={
        200: {
            "content": {"application/pdf": {}},
            "description": "PDF document"
        },
        404: {
            "description": "Purchase not found",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "PURCHASE_NOT_FOUND",
                            "message": "Purchase 123 not found",
                            "details": None,
                            "retryable": False
                        }
                    }
                }
            }
        }
    }
)
async def download_invoice_pdf(
    purchase_id: int,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    """
    Download the invoice of a purchase as a PDF file.

    Line prices are the ones frozen at purchase time.
    """
    pdf_service = ReportLabPdfService(
        company_name=ApplicationConfig.COMPANY_NAME,
        company_address=ApplicationConfig.COMPANY_ADDRESS,
        currency=ApplicationConfig.CURRENCY,
    )
    use_case = GeneratePurchaseInvoice(
        SqlAlchemyPurchaseRepository(session),
        SqlAlchemyProductRepository(session),
        pdf_service,
    )
    result = await use_case.execute(purchase_id, user_id=scope_for(user))

    if result.is_err():
        raise to_client_error(result.error)

    return Response(
        content=result.value.pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename=invoice_{result.value.invoice_number}.pdf"
        }
    )
