"""Storage error translation

Maps SQLAlchemy/DBAPI errors raised inside adapters to the purchase failure
taxonomy, so use cases only ever see TransientStoreFailure or
FatalStoreFailure.
"""

import functools
import logging
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from src.domain.exceptions import FatalStoreFailure, TransientStoreFailure

logger = logging.getLogger(__name__)

# serialization_failure, deadlock_detected, lock_not_available, query_canceled,
# unique_violation (two transactions drew the same invoice number)
TRANSIENT_SQLSTATES = {"40001", "40P01", "55P03", "57014", "23505"}

TRANSIENT_MESSAGES = (
    "database is locked",
    "lock wait timeout",
    "deadlock",
    "could not obtain lock",
    "unique constraint failed",
)


def is_transient(error: SQLAlchemyError) -> bool:
    if not isinstance(error, DBAPIError):
        return False
    if error.connection_invalidated:
        return True

    orig = error.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in TRANSIENT_SQLSTATES:
        return True

    message = str(orig).lower()
    return any(marker in message for marker in TRANSIENT_MESSAGES)


def translate(error: SQLAlchemyError):
    """Build the domain failure for a storage error"""
    if is_transient(error):
        return TransientStoreFailure(reason=str(error))
    return FatalStoreFailure(reason=str(error))


def translate_store_errors(func):
    """
    Decorator for async adapter methods

    Re-raises SQLAlchemy errors as TransientStoreFailure/FatalStoreFailure.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except SQLAlchemyError as e:
            failure = translate(e)
            logger.error(f"{func.__qualname__} failed ({failure.code}): {e}")
            raise failure from e

    return wrapper
