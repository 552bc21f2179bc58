"""Purchase Domain Entity

Header of a committed purchase transaction.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from sqlmodel import Field, Column, Index
from sqlalchemy import CheckConstraint, ForeignKey, Numeric, String
from src.domain.base import BaseModel, IdType


class PurchaseStatus(str, Enum):
    """Purchase status types"""
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Purchase(BaseModel, table=True):
    """
    Purchase - Header row of a purchase transaction

    Domain Rules:
    - invoice_number is unique and assigned exactly once, before insert
    - total_amount is the exact sum of its purchase_lines.subtotal
    - At least one PurchaseLine per Purchase
    - Only status changes after creation (refunds/cancellations happen elsewhere)
    """

    __tablename__ = "purchases"
    __table_args__ = (
        CheckConstraint('total_amount > 0', name='total_amount_positive'),
        Index('ix_purchases_user_id', 'user_id'),
        Index('ix_purchases_purchased_at', 'purchased_at'),
        Index('ix_purchases_status', 'status'),
    )

    id: int = Field(
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique purchase identifier (auto-increment)"
    )

    user_id: int = Field(
        sa_column=Column(IdType, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False),
        description="Purchaser (foreign key to users)"
    )

    purchased_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Transaction timestamp"
    )

    total_amount: Decimal = Field(
        sa_column=Column(Numeric(12, 2), nullable=False),
        description="Sum of line subtotals (precision: 12,2)"
    )

    status: PurchaseStatus = Field(
        default=PurchaseStatus.COMPLETED,
        description="Purchase status (pending, completed, cancelled)"
    )

    invoice_number: str = Field(
        sa_column=Column(String(50), nullable=False, unique=True),
        description="Unique invoice number (e.g., INV-1718035200123-042)"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Row creation timestamp"
    )

    updated_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Last status change timestamp"
    )
