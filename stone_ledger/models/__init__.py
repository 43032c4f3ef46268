"""
Data Models Package

Pydantic models for worker records, ledger aggregates and activity events.
"""

from stone_ledger.models.worker import (
    RATE_PER_KG,
    LedgerStats,
    WorkerRecord,
    calculate_payment,
    format_display_date,
    is_finite_number,
    round2,
)
from stone_ledger.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivityEventType,
    ActivitySeverity,
)

__all__ = [
    # Worker models
    "RATE_PER_KG",
    "LedgerStats",
    "WorkerRecord",
    "calculate_payment",
    "format_display_date",
    "is_finite_number",
    "round2",
    # Activity models
    "ActivityEvent",
    "ActivityEventBuilder",
    "ActivityEventType",
    "ActivitySeverity",
]
