"""Result type shared by use cases

Use cases return Result instead of raising for expected business outcomes.
The API layer inspects is_ok()/is_err() and maps Error.code to HTTP status.
"""

from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar
from pydantic import BaseModel, Field

T = TypeVar("T")


class Error(BaseModel):
    """Typed failure returned by a use case"""

    code: str = Field(..., description="Stable machine-readable error code")
    message: str = Field(..., description="User-facing message")
    reason: Optional[str] = Field(default=None, description="Server-side diagnostic, not rendered to clients")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Structured data for the caller")
    retryable: bool = Field(default=False, description="Whether the whole operation may be retried")


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[Error] = None

    def is_ok(self) -> bool:
        return self.error is None

    def is_err(self) -> bool:
        return self.error is not None


class Return:
    """Constructors for Result"""

    @staticmethod
    def ok(value: T) -> Result[T]:
        return Result(value=value)

    @staticmethod
    def err(error: Error) -> Result[Any]:
        return Result(error=error)
