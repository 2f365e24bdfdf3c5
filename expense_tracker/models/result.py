"""
Operation Results

DESIGN DECISION: Expected failures (duplicate email, bad credentials,
missing expense) are returned as values, not raised. Callers always get a
Result back and decide how to display the message.
"""

from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Kinds of failure a store operation can report."""
    DUPLICATE_EMAIL = "duplicate_email"
    INVALID_CREDENTIALS = "invalid_credentials"
    NOT_FOUND = "not_found"
    MALFORMED_PERSISTED_DATA = "malformed_persisted_data"


class Failure(BaseModel):
    """Tagged failure with a message fit to show a user."""

    kind: ErrorKind
    message: str


class Result(BaseModel, Generic[T]):
    """Either a value (success) or a Failure."""

    success: bool
    value: Optional[T] = None
    error: Optional[Failure] = None

    @classmethod
    def ok(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str) -> "Result[T]":
        return cls(success=False, error=Failure(kind=kind, message=message))

    @property
    def message(self) -> Optional[str]:
        return self.error.message if self.error else None
