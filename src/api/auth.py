"""Caller identity for purchase routes

The X-User-Id header carries the identity authenticated upstream; it is
resolved to an active User here.
"""

from typing import Optional
from fastapi import Depends, Header, status
from sqlmodel.ext.asyncio.session import AsyncSession
from src.adapter.repositories.user_repository import SqlAlchemyUserRepository
from src.api.error import ClientError
from src.depends import get_session
from src.domain.user import User, UserRole
from src.libs.result import Error


async def get_current_user(
    x_user_id: Optional[int] = Header(default=None),
    session: AsyncSession = Depends(get_session),
) -> User:
    if x_user_id is None:
        raise ClientError(
            Error(code="UNAUTHENTICATED", message="Missing X-User-Id header"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    user = await SqlAlchemyUserRepository(session).get_by_id(x_user_id)
    if not user or not user.is_active:
        raise ClientError(
            Error(code="UNAUTHENTICATED", message="Unknown or inactive user"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    return user


async def get_current_customer(user: User = Depends(get_current_user)) -> User:
    if user.role != UserRole.CUSTOMER:
        raise ClientError(
            Error(code="FORBIDDEN", message="Only customers can make purchases"),
            status_code=status.HTTP_403_FORBIDDEN,
        )
    return user
