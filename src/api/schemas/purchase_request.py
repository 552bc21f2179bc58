"""Request schemas for Purchase API

Pydantic models for validating incoming HTTP requests.
"""

from datetime import date, datetime, time, timezone
from typing import List, Optional
from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator


class PurchaseItemSchema(BaseModel):
    """One cart line"""

    product_id: int = Field(
        ...,
        gt=0,
        description="Product identifier (must be > 0)"
    )

    quantity: int = Field(
        ...,
        ge=1,
        description="Units to purchase (must be >= 1)"
    )


class PurchaseRequestSchema(BaseModel):
    """
    Request schema for executing a purchase

    Used for POST /purchases endpoint. The purchaser is the authenticated
    caller; prices are never accepted from the client.
    """

    items: List[PurchaseItemSchema] = Field(
        ...,
        min_length=1,
        description="Cart lines (at least one, each product at most once)"
    )

    @field_validator('items')
    @classmethod
    def validate_unique_products(cls, v):
        """Each product may appear only once per cart"""
        product_ids = [item.product_id for item in v]
        duplicates = sorted({pid for pid in product_ids if product_ids.count(pid) > 1})
        if duplicates:
            raise ValueError(f"Duplicate product_id in cart: {', '.join(str(d) for d in duplicates)}")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "items": [
                    {"product_id": 1, "quantity": 2},
                    {"product_id": 2, "quantity": 1}
                ]
            }
        }


_DATE = TypeAdapter(date)
_DATETIME = TypeAdapter(datetime)


def parse_date_bound(value: Optional[str], end: bool = False) -> Optional[datetime]:
    """
    Turn a listing bound into a naive UTC datetime

    A date-only value covers the whole day: midnight for a start bound,
    23:59:59.999999 for an end bound. Datetimes with an offset are converted
    to UTC, matching the naive UTC purchased_at column.

    Raises:
        ValueError: value is neither an ISO date nor an ISO datetime
    """
    if value is None:
        return None

    value = value.strip()
    if len(value) == 10:
        try:
            day = _DATE.validate_python(value)
        except ValidationError:
            raise ValueError(f"Invalid date: {value}")
        return datetime.combine(day, time.max if end else time.min)

    try:
        moment = _DATETIME.validate_python(value)
    except ValidationError:
        raise ValueError(f"Invalid datetime: {value}")
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment
