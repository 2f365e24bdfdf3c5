"""
Audit Logger

Every registration, login, session change and expense edit leaves an
AuditEvent behind, along with any malformed slot data we had to step over.

CRITICAL: Credentials never reach the log. Events are built without them,
and the redact_credentials processor masks any that slip into a log call.

Logging is synchronous like the stores that call it, and a failing audit
backend is reported locally instead of breaking the operation.
"""

from typing import Optional

import structlog

from expense_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from expense_tracker.services.storage import AuditStorageInterface


CREDENTIAL_KEYS = frozenset({
    "password",
    "confirm_password",
    "password_hash",
    "passwordHash",
})

REDACTED = "[redacted]"


def redact_credentials(logger, method_name, event_dict):
    """structlog processor: mask credential fields at the top level and in details."""
    for key in CREDENTIAL_KEYS & event_dict.keys():
        event_dict[key] = REDACTED
    details = event_dict.get("details")
    if isinstance(details, dict) and CREDENTIAL_KEYS & details.keys():
        event_dict["details"] = {
            k: (REDACTED if k in CREDENTIAL_KEYS else v) for k, v in details.items()
        }
    return event_dict


structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        redact_credentials,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(sort_keys=True),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


_LEVELS = {
    AuditSeverity.DEBUG: "debug",
    AuditSeverity.INFO: "info",
    AuditSeverity.WARNING: "warning",
    AuditSeverity.ERROR: "error",
    AuditSeverity.CRITICAL: "critical",
}


class AuditLogger:
    """Writes audit events to the structured log and, optionally, to storage."""

    def __init__(self, storage: Optional[AuditStorageInterface] = None):
        self._storage = storage
        self._logger = structlog.get_logger("expense_tracker.audit")

    @property
    def has_storage(self) -> bool:
        return self._storage is not None

    def log(self, event: AuditEvent) -> bool:
        """
        Record an event.

        Returns False only when the storage backend rejected or failed the
        write; the local log line is emitted regardless.
        """
        level = _LEVELS.get(event.severity, "info")
        getattr(self._logger, level)("audit_event", **event.to_log_dict())

        if self._storage is None:
            return True
        try:
            return self._storage.append_event(event)
        except Exception as e:
            self._logger.error(
                "audit_storage_failed",
                error=str(e),
                event_id=str(event.event_id),
                event_type=event.event_type.value,
            )
            return False

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.log(
            AuditEventBuilder.system_error(
                error_type=error_type,
                error_message=error_message,
                details=details,
            )
        )

    def recent_events(self, limit: int = 20) -> list[AuditEvent]:
        """Newest first. Empty when no storage is configured."""
        if self._storage is None:
            return []
        return self._storage.get_recent_events(limit)
