"""
Activity Event Models for Stone Ledger

Every ledger mutation produces one structured event. Events are written
to the process log only; the ledger keeps no history beyond the current
record set.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class ActivityEventType(str, Enum):
    """Types of events the ledger emits."""
    # Record mutations
    WORKER_ADDED = "worker_added"
    WORKER_UPDATED = "worker_updated"
    WORKER_REMOVED = "worker_removed"

    # Whole-ledger operations
    LEDGER_CLEARED = "ledger_cleared"
    LEDGER_IMPORTED = "ledger_imported"
    LEDGER_LOADED = "ledger_loaded"

    # Problems
    LOAD_FAILED = "load_failed"
    IMPORT_REJECTED = "import_rejected"
    PAYMENT_RECOMPUTED = "payment_recomputed"
    PERSISTENCE_FAILED = "persistence_failed"


class ActivitySeverity(str, Enum):
    """Severity level for activity events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ActivityEvent(BaseModel):
    """A single activity event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )
    event_type: ActivityEventType
    severity: ActivitySeverity = ActivitySeverity.INFO

    record_id: Optional[int] = Field(
        default=None,
        description="Worker record this event is about, if any"
    )
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "record_id": self.record_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class ActivityEventBuilder:
    """
    Helper class to build activity events with common patterns.

    Usage:
        event = ActivityEventBuilder.worker_added(record)
        event = ActivityEventBuilder.ledger_cleared(removed=3)
    """

    @staticmethod
    def worker_added(record_id: int, name: str, stones_broken: float, payment: float) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.WORKER_ADDED,
            record_id=record_id,
            description=f"Worker added: {name} - {stones_broken} kg",
            details={
                "name": name,
                "stones_broken": stones_broken,
                "payment": payment,
            },
        )

    @staticmethod
    def worker_updated(
        record_id: int,
        old_stones: float,
        new_stones: float,
        payment: float,
    ) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.WORKER_UPDATED,
            record_id=record_id,
            description=f"Weight changed from {old_stones} kg to {new_stones} kg",
            details={
                "old_stones_broken": old_stones,
                "new_stones_broken": new_stones,
                "payment": payment,
            },
        )

    @staticmethod
    def worker_removed(record_id: int, name: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.WORKER_REMOVED,
            record_id=record_id,
            description=f"Worker removed: {name}",
            details={"name": name},
        )

    @staticmethod
    def ledger_cleared(removed: int) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.LEDGER_CLEARED,
            description=f"Ledger cleared ({removed} records dropped)",
            details={"removed": removed},
        )

    @staticmethod
    def ledger_imported(count: int, recomputed: int) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.LEDGER_IMPORTED,
            description=f"Ledger replaced with {count} imported records",
            details={
                "count": count,
                "payments_recomputed": recomputed,
            },
        )

    @staticmethod
    def ledger_loaded(count: int, key: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.LEDGER_LOADED,
            severity=ActivitySeverity.DEBUG,
            description=f"Loaded {count} records",
            details={"count": count, "storage_key": key},
        )

    @staticmethod
    def load_failed(key: str, reason: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.LOAD_FAILED,
            severity=ActivitySeverity.ERROR,
            description="Stored ledger is unreadable, starting empty",
            details={"storage_key": key},
            error_message=reason,
        )

    @staticmethod
    def import_rejected(reason: str, issue_count: int = 0) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.IMPORT_REJECTED,
            severity=ActivitySeverity.WARNING,
            description="Import rejected",
            details={"issue_count": issue_count},
            error_message=reason,
        )

    @staticmethod
    def payment_recomputed(record_id: int, supplied: Any, computed: float) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.PAYMENT_RECOMPUTED,
            severity=ActivitySeverity.WARNING,
            record_id=record_id,
            description="Supplied payment did not match the payment rule",
            details={
                "supplied_payment": supplied,
                "computed_payment": computed,
            },
        )

    @staticmethod
    def persistence_failed(operation: str, error_message: str) -> ActivityEvent:
        return ActivityEvent(
            event_type=ActivityEventType.PERSISTENCE_FAILED,
            severity=ActivitySeverity.ERROR,
            description=f"Could not persist ledger after {operation}",
            details={"operation": operation},
            error_message=error_message,
        )
