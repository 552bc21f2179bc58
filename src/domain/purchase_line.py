"""Purchase Line Domain Entity

One product entry within a purchase, with the price frozen at purchase time.
"""

from datetime import datetime
from decimal import Decimal
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, ForeignKey, Integer, Numeric
from src.domain.base import BaseModel, IdType


class PurchaseLine(BaseModel, table=True):
    """
    Purchase Line - Line item within a purchase

    Domain Rules:
    - Belongs to exactly one purchase (deleted with it)
    - Products referenced by lines cannot be deleted
    - unit_price is a snapshot, later catalog edits never change it
    - subtotal = quantity * unit_price, always computed server-side
    """

    __tablename__ = "purchase_lines"
    __table_args__ = (
        CheckConstraint('quantity > 0', name='line_quantity_positive'),
        CheckConstraint('unit_price > 0', name='line_unit_price_positive'),
        Index('ix_purchase_lines_purchase_id', 'purchase_id'),
        Index('ix_purchase_lines_product_id', 'product_id'),
    )

    id: int = Field(
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique line identifier (auto-increment)"
    )

    purchase_id: int = Field(
        sa_column=Column(IdType, ForeignKey("purchases.id", ondelete="CASCADE"), nullable=False),
        description="Foreign key to Purchase"
    )

    product_id: int = Field(
        sa_column=Column(IdType, ForeignKey("products.id", ondelete="RESTRICT"), nullable=False),
        description="Foreign key to Product"
    )

    quantity: int = Field(
        sa_column=Column(Integer, nullable=False),
        description="Units purchased (> 0)"
    )

    unit_price: Decimal = Field(
        sa_column=Column(Numeric(10, 2), nullable=False),
        description="Unit price snapshot at purchase time"
    )

    subtotal: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
        description="quantity * unit_price"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Line creation timestamp"
    )
