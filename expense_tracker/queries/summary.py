"""
Expense Summaries

Totals shown above the dashboard table: all-time, current calendar month,
and record count. Like the filters, these are pure functions.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Iterable, Optional

from babel.numbers import format_currency as babel_format_currency
from pydantic import BaseModel, Field

from expense_tracker.models.expense import Expense
from expense_tracker.validation import parse_amount


class ExpenseSummary(BaseModel):
    """Aggregate figures for a list of expenses."""

    total: Decimal = Field(
        default=Decimal("0"),
        description="Sum of every amount"
    )
    this_month_total: Decimal = Field(
        default=Decimal("0"),
        description="Sum of amounts dated in the current calendar month"
    )
    count: int = Field(
        default=0,
        ge=0,
        description="Number of expenses"
    )


def summarize(
    expenses: Iterable[Expense],
    today: Optional[date] = None,
) -> ExpenseSummary:
    today = today or date.today()
    total = Decimal("0")
    this_month = Decimal("0")
    count = 0

    for expense in expenses:
        count += 1
        total += expense.amount
        if (expense.expense_date.year, expense.expense_date.month) == (today.year, today.month):
            this_month += expense.amount

    return ExpenseSummary(total=total, this_month_total=this_month, count=count)


def format_currency(
    amount: Any,
    currency: str = "INR",
    locale: str = "en_IN",
) -> str:
    """
    Format an amount for display, e.g. 1234.5 -> "₹1,234.50".

    Anything that isn't a number formats as zero.
    """
    value = parse_amount(amount)
    if value is None:
        value = Decimal("0")
    return babel_format_currency(value, currency, locale=locale)
