"""
Expense Models

These models define the schema for expense records and for the field sets
callers pass in when creating or editing one.

DESIGN DECISION: Records are always scoped by user_id.
The store never exposes an expense through a lookup that ignores its owner.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import Field, field_validator

from expense_tracker.models.base import PersistedModel, utc_now


class ExpenseCategory(str, Enum):
    """
    Supported expense categories.

    DESIGN DECISION: Using explicit categories rather than free text ensures
    consistent categorization and enables reliable filtering.
    """
    FOOD = "Food"
    TRANSPORT = "Transport"
    SHOPPING = "Shopping"
    BILLS = "Bills"
    ENTERTAINMENT = "Entertainment"
    HEALTH = "Health"
    EDUCATION = "Education"
    OTHER = "Other"


def _blank_if_none(v):
    return "" if v is None else v


class Expense(PersistedModel):
    """A single expense owned by one user."""

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique expense ID"
    )
    user_id: UUID = Field(
        ...,
        description="Owning user"
    )
    title: str = Field(
        ...,
        min_length=1,
        description="Short label for the expense"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount spent"
    )
    category: ExpenseCategory
    expense_date: date = Field(
        ...,
        alias="date",
        description="Calendar date of the expense"
    )
    description: str = Field(
        default="",
        description="Optional free-text notes"
    )

    # Timestamps
    created_at: datetime = Field(
        default_factory=utc_now,
        description="When the expense was recorded"
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        description="Last modification, if any"
    )

    @field_validator('description', mode='before')
    @classmethod
    def blank_description(cls, v):
        return _blank_if_none(v)


class ExpenseDraft(PersistedModel):
    """Fields supplied when creating an expense."""

    title: str
    amount: Decimal
    category: ExpenseCategory
    expense_date: date = Field(..., alias="date")
    description: str = ""

    @field_validator('description', mode='before')
    @classmethod
    def blank_description(cls, v):
        return _blank_if_none(v)


class ExpenseUpdate(PersistedModel):
    """
    Partial edit of an expense.

    Only fields the caller actually provided are merged; anything left
    unset keeps its stored value.
    """

    title: Optional[str] = None
    amount: Optional[Decimal] = None
    category: Optional[ExpenseCategory] = None
    expense_date: Optional[date] = Field(default=None, alias="date")
    description: Optional[str] = None

    def changes(self) -> dict:
        """Provided fields, keyed by attribute name."""
        return self.model_dump(exclude_unset=True, exclude_none=True)
