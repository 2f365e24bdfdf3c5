"""
Audit Models for Expense Tracker

Every significant action in the system is logged for audit purposes.
This provides:
1. Traceability of account and expense changes
2. Debugging information when persisted data turns out malformed
3. A record of failed logins

DESIGN DECISION: Audit events never carry plaintext passwords or digests.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from expense_tracker.models.base import utc_now


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Accounts
    USER_REGISTERED = "user_registered"
    REGISTRATION_REJECTED = "registration_rejected"
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"

    # Sessions
    SESSION_STARTED = "session_started"
    SESSION_ENDED = "session_ended"
    AUTH_REDIRECT = "auth_redirect"

    # Expenses
    EXPENSE_CREATED = "expense_created"
    EXPENSE_UPDATED = "expense_updated"
    EXPENSE_DELETED = "expense_deleted"
    EXPENSE_NOT_FOUND = "expense_not_found"

    # Storage
    MALFORMED_DATA_RECOVERED = "malformed_data_recovered"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'user', 'expense', 'slot')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )
    user_id: Optional[str] = Field(
        default=None,
        description="User on whose behalf the action ran"
    )

    description: str = Field(
        ...,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "user_id": self.user_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.user_registered(user_id, email)
        event = AuditEventBuilder.expense_deleted(user_id, expense_id)
    """

    @staticmethod
    def user_registered(user_id: UUID, email: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_REGISTERED,
            entity_type="user",
            entity_id=str(user_id),
            user_id=str(user_id),
            description=f"User registered: {email}",
            details={"email": email},
            is_user_action=True,
        )

    @staticmethod
    def registration_rejected(email: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REGISTRATION_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            description=f"Registration rejected: {reason}",
            details={"email": email, "reason": reason},
            is_user_action=True,
        )

    @staticmethod
    def login_succeeded(user_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_SUCCEEDED,
            entity_type="user",
            entity_id=str(user_id),
            user_id=str(user_id),
            description="Login succeeded",
            is_user_action=True,
        )

    @staticmethod
    def login_failed(email: str) -> AuditEvent:
        # Same event for unknown email and wrong password
        return AuditEvent(
            event_type=AuditEventType.LOGIN_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            description="Login failed",
            details={"email": email},
            is_user_action=True,
        )

    @staticmethod
    def session_started(user_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_STARTED,
            entity_type="session",
            user_id=str(user_id),
            description="Session started",
        )

    @staticmethod
    def session_ended(user_id: Optional[UUID]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_ENDED,
            entity_type="session",
            user_id=str(user_id) if user_id else None,
            description="Session ended" if user_id else "Session cleared (none active)",
            is_user_action=True,
        )

    @staticmethod
    def auth_redirect(target: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.AUTH_REDIRECT,
            entity_type="session",
            description=f"Unauthenticated access redirected to {target}",
            details={"target": target},
        )

    @staticmethod
    def expense_created(user_id: UUID, expense_id: UUID, amount: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_CREATED,
            entity_type="expense",
            entity_id=str(expense_id),
            user_id=str(user_id),
            description=f"Expense created: {amount}",
            details={"amount": amount},
            is_user_action=True,
        )

    @staticmethod
    def expense_updated(
        user_id: UUID,
        expense_id: UUID,
        fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_UPDATED,
            entity_type="expense",
            entity_id=str(expense_id),
            user_id=str(user_id),
            description=f"Expense updated ({len(fields)} fields)",
            details={"fields": fields},
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(user_id: UUID, expense_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=str(expense_id),
            user_id=str(user_id),
            description="Expense deleted",
            is_user_action=True,
        )

    @staticmethod
    def expense_not_found(user_id: UUID, expense_id: str, operation: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_NOT_FOUND,
            severity=AuditSeverity.WARNING,
            entity_type="expense",
            entity_id=expense_id,
            user_id=str(user_id),
            description=f"Expense not found for {operation}",
            details={"operation": operation},
        )

    @staticmethod
    def malformed_data_recovered(slot: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MALFORMED_DATA_RECOVERED,
            severity=AuditSeverity.WARNING,
            entity_type="slot",
            entity_id=slot,
            description=f"Malformed data in slot {slot} ignored",
            details={"slot": slot, "reason": reason},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
        )
