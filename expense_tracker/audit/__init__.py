"""Audit logging package."""

from expense_tracker.audit.logger import AuditLogger, redact_credentials

__all__ = ["AuditLogger", "redact_credentials"]
