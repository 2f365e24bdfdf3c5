"""Expense filtering, sorting and summary package."""

from expense_tracker.queries.filters import (
    ExpenseQuery,
    SortOrder,
    apply_filters,
    matches_text,
)
from expense_tracker.queries.summary import ExpenseSummary, format_currency, summarize

__all__ = [
    "ExpenseQuery",
    "ExpenseSummary",
    "SortOrder",
    "apply_filters",
    "format_currency",
    "matches_text",
    "summarize",
]
