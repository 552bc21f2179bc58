from typing import Dict, Optional
from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from src.domain.exceptions import PurchaseError
from src.libs.result import Error


class ClientError(Exception):
    """Use case Error raised to the HTTP layer with its response status"""

    def __init__(
        self,
        error: Error,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(error.message)
        self.error = error
        self.status_code = status_code
        self.headers = headers


def error_body(error: Error) -> dict:
    # reason is server-side only
    return {
        "error": {
            "code": error.code,
            "message": error.message,
            "details": error.details,
            "retryable": error.retryable,
        }
    }


async def client_error_handler(request: Request, exc: ClientError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(error_body(exc.error)),
        headers=exc.headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    error = Error(
        code="VALIDATION_ERROR",
        message="Invalid request parameters",
        details={"errors": errors},
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=jsonable_encoder(error_body(error)),
    )


ERROR_STATUS = {
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
    "PRODUCTS_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "PURCHASE_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INSUFFICIENT_STOCK": status.HTTP_409_CONFLICT,
    "SEQUENCING_EXHAUSTED": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "TRANSIENT_STORE_FAILURE": status.HTTP_503_SERVICE_UNAVAILABLE,
    "FATAL_STORE_FAILURE": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "GENERATE_INVOICE_FAILED": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def to_client_error(error: Error) -> ClientError:
    headers = {"Retry-After": "1"} if error.retryable else None
    return ClientError(
        error,
        status_code=ERROR_STATUS.get(error.code, status.HTTP_400_BAD_REQUEST),
        headers=headers,
    )


async def purchase_error_handler(request: Request, exc: PurchaseError) -> JSONResponse:
    # store failures raised outside a purchase transaction, e.g. on reads
    return await client_error_handler(request, to_client_error(exc.to_error()))
