"""Form validation package."""

from expense_tracker.validation.validator import FormValidator, parse_amount, parse_date

__all__ = ["FormValidator", "parse_amount", "parse_date"]
