"""
Expense Filtering and Sorting

DESIGN DECISION: These are pure, stateless transforms over the list the
Expense Store returns for a user. They never touch storage, so a dashboard
can re-filter as often as it likes.
"""

from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field

from expense_tracker.models.expense import Expense, ExpenseCategory


class SortOrder(str, Enum):
    """Dashboard sort options."""
    DATE_DESC = "date_desc"
    DATE_ASC = "date_asc"
    AMOUNT_ASC = "amount_asc"
    AMOUNT_DESC = "amount_desc"


class ExpenseQuery(BaseModel):
    """
    What the dashboard is currently showing.

    Empty text / no category means "don't filter on it".
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    text: str = Field(
        default="",
        description="Case-insensitive match against title or description"
    )
    category: Optional[ExpenseCategory] = None
    sort: SortOrder = SortOrder.DATE_DESC


def matches_text(expense: Expense, text: str) -> bool:
    needle = text.lower()
    return needle in expense.title.lower() or needle in expense.description.lower()


def apply_filters(
    expenses: Iterable[Expense],
    query: Optional[ExpenseQuery] = None,
) -> list[Expense]:
    """Filter then sort. The input is left untouched; ties keep their order."""
    query = query or ExpenseQuery()
    filtered = list(expenses)

    if query.text:
        filtered = [e for e in filtered if matches_text(e, query.text)]

    if query.category:
        filtered = [e for e in filtered if e.category == query.category]

    if query.sort == SortOrder.DATE_ASC:
        filtered.sort(key=lambda e: e.expense_date)
    elif query.sort == SortOrder.DATE_DESC:
        filtered.sort(key=lambda e: e.expense_date, reverse=True)
    elif query.sort == SortOrder.AMOUNT_ASC:
        filtered.sort(key=lambda e: e.amount)
    elif query.sort == SortOrder.AMOUNT_DESC:
        filtered.sort(key=lambda e: e.amount, reverse=True)

    return filtered
