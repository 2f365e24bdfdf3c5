"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
All data flowing through the system must conform to these schemas.
"""

from expense_tracker.models.user import Session, User, normalize_email
from expense_tracker.models.expense import (
    Expense,
    ExpenseCategory,
    ExpenseDraft,
    ExpenseUpdate,
)
from expense_tracker.models.result import ErrorKind, Failure, Result
from expense_tracker.models.validation import ValidationIssue, ValidationResult
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Account models
    "Session",
    "User",
    "normalize_email",
    # Expense models
    "Expense",
    "ExpenseCategory",
    "ExpenseDraft",
    "ExpenseUpdate",
    # Results
    "ErrorKind",
    "Failure",
    "Result",
    # Validation
    "ValidationIssue",
    "ValidationResult",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
