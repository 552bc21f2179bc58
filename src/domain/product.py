"""Product Domain Entity

Catalog entry with its available stock. The catalog owns creation and edits;
the purchase engine only reads price/quantity and decrements quantity under
a row lock.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, Integer, Numeric, String, Text
from src.domain.base import BaseModel, IdType


class Product(BaseModel, table=True):
    """
    Product - Inventory item with available quantity

    Domain Rules:
    - lot_number is unique and immutable after creation
    - unit_price is positive with 2 decimal places
    - available_quantity never goes negative
    - Inactive products cannot be purchased
    """

    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint('unit_price > 0', name='unit_price_positive'),
        CheckConstraint('available_quantity >= 0', name='available_quantity_non_negative'),
        Index('ix_products_is_active', 'is_active'),
        Index('ix_products_name', 'name'),
    )

    id: int = Field(
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique product identifier (auto-increment)"
    )

    lot_number: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Unique lot code (immutable)"
    )

    name: str = Field(
        sa_column=Column(String(200), nullable=False),
        description="Product name"
    )

    description: Optional[str] = Field(
        default=None,
        sa_column=Column(Text, nullable=True),
        description="Optional long description"
    )

    unit_price: Decimal = Field(
        sa_column=Column(Numeric(10, 2), nullable=False),
        description="Current catalog price (precision: 10,2)"
    )

    available_quantity: int = Field(
        default=0,
        sa_column=Column(Integer, nullable=False, default=0),
        description="Units available for purchase (>= 0)"
    )

    received_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Date the lot entered the inventory"
    )

    is_active: bool = Field(
        default=True,
        description="Inactive products are hidden from purchases"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last update timestamp"
    )

    def has_stock(self, quantity: int) -> bool:
        return self.available_quantity >= quantity

    class Config:
        """SQLModel configuration"""
        json_schema_extra = {
            "example": {
                "id": 1,
                "lot_number": "LOT-2024-0001",
                "name": "Paracetamol 500mg",
                "unit_price": "10.00",
                "available_quantity": 25,
                "is_active": True,
            }
        }
