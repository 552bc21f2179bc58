"""User Domain Entity

Purchaser identity. Registration and credentials live outside this service;
purchases only reference users by id.
"""

from datetime import datetime
from enum import Enum
from sqlmodel import Field, Column
from sqlalchemy import String
from src.domain.base import BaseModel, IdType


class UserRole(str, Enum):
    """User roles"""
    ADMIN = "admin"
    CUSTOMER = "customer"


class User(BaseModel, table=True):
    """
    User - Purchaser identity

    Domain Rules:
    - email is unique
    - Only active customers may place purchases
    - Admins may read every purchase
    """

    __tablename__ = "users"

    id: int = Field(
        sa_column=Column(IdType, primary_key=True, autoincrement=True),
        description="Unique user identifier (auto-increment)"
    )

    name: str = Field(
        sa_column=Column(String(100), nullable=False),
        description="Display name"
    )

    email: str = Field(
        sa_column=Column(String(150), nullable=False, unique=True),
        description="Unique email address"
    )

    role: UserRole = Field(
        default=UserRole.CUSTOMER,
        description="User role (admin, customer)"
    )

    is_active: bool = Field(
        default=True,
        description="Inactive users cannot purchase"
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="Registration timestamp"
    )
