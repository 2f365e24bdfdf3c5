"""
Form Validation

DESIGN DECISION: Field validation happens before the stores are called.
The stores only normalize (trim, coerce); they trust that required fields
are present, amounts are positive and dates are real.

Checks stop at the first failing rule for each form, matching how the
forms show a single message at a time.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them for the user to correct.
"""

import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from expense_tracker.config import get_settings
from expense_tracker.models.expense import ExpenseCategory
from expense_tracker.models.validation import ValidationIssue, ValidationResult


EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

LOGIN_REQUIRED_MESSAGE = "Please enter both email and password."
REGISTER_REQUIRED_MESSAGE = "All fields are required."
INVALID_EMAIL_MESSAGE = "Please enter a valid email address."
PASSWORD_MISMATCH_MESSAGE = "Passwords do not match."
EXPENSE_REQUIRED_MESSAGE = "Please fill in all required fields."
INVALID_AMOUNT_MESSAGE = "Amount must be a positive number greater than zero."
INVALID_DATE_MESSAGE = "Please provide a valid date."
INVALID_CATEGORY_MESSAGE = "Please choose a valid category."


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_amount(value: Any) -> Optional[Decimal]:
    """Parse a form amount; None if it isn't a finite number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


def parse_date(value: Any) -> Optional[date]:
    """Parse a yyyy-mm-dd string; None if it isn't a real calendar date."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not DATE_PATTERN.match(value.strip()):
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


class FormValidator:
    """Validates login, registration and expense form submissions."""

    def __init__(self, min_password_length: Optional[int] = None):
        if min_password_length is None:
            min_password_length = get_settings().auth.min_password_length
        self._min_password_length = min_password_length

    def validate_login(self, email: Optional[str], password: Optional[str]) -> ValidationResult:
        result = ValidationResult(form="login")
        if _blank(email) or not password:
            result.issues.append(ValidationIssue(
                field="email" if _blank(email) else "password",
                issue_type="missing",
                message=LOGIN_REQUIRED_MESSAGE,
            ))
        return result

    def validate_registration(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        confirm_password: Optional[str],
    ) -> ValidationResult:
        result = ValidationResult(form="register")
        fields = {
            "name": name,
            "email": email,
            "password": password,
            "confirm_password": confirm_password,
        }
        missing = [f for f, v in fields.items() if _blank(v)]

        if missing:
            result.issues.append(ValidationIssue(
                field=missing[0],
                issue_type="missing",
                message=REGISTER_REQUIRED_MESSAGE,
            ))
        elif not EMAIL_PATTERN.match(email.strip()):
            result.issues.append(ValidationIssue(
                field="email",
                issue_type="invalid_format",
                message=INVALID_EMAIL_MESSAGE,
            ))
        elif len(password) < self._min_password_length:
            result.issues.append(ValidationIssue(
                field="password",
                issue_type="too_short",
                message=(
                    f"Password must be at least {self._min_password_length} "
                    "characters long."
                ),
            ))
        elif password != confirm_password:
            result.issues.append(ValidationIssue(
                field="confirm_password",
                issue_type="mismatch",
                message=PASSWORD_MISMATCH_MESSAGE,
            ))
        return result

    def validate_expense(self, form: Mapping[str, Any]) -> ValidationResult:
        """
        Validate an add/edit expense form.

        Expected keys: title, amount, category, date, description (optional).
        """
        result = ValidationResult(form="expense")
        required = ("title", "amount", "category", "date")
        missing = [f for f in required if _blank(form.get(f))]

        if missing:
            result.issues.append(ValidationIssue(
                field=missing[0],
                issue_type="missing",
                message=EXPENSE_REQUIRED_MESSAGE,
            ))
            return result

        amount = parse_amount(form.get("amount"))
        if amount is None or amount <= 0:
            result.issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message=INVALID_AMOUNT_MESSAGE,
            ))
            return result

        if parse_date(form.get("date")) is None:
            result.issues.append(ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message=INVALID_DATE_MESSAGE,
            ))
            return result

        if form.get("category") not in {c.value for c in ExpenseCategory}:
            result.issues.append(ValidationIssue(
                field="category",
                issue_type="invalid_value",
                message=INVALID_CATEGORY_MESSAGE,
            ))
        return result
