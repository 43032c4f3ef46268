"""
Activity Logger

DESIGN DECISION: Every ledger mutation is logged as one structured event.
This provides:
1. Traceability of who-earned-what changes while the app runs
2. Debugging capability when a stored ledger fails to load
3. A visible trail of payments that were recomputed on import

Events go to the structured process log only. Nothing here is persisted.
"""

import logging
from typing import Any, Optional

import structlog

from stone_ledger.models.activity import (
    ActivityEvent,
    ActivityEventBuilder,
    ActivitySeverity,
)


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer(ensure_ascii=False)
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Attach a stdlib root handler so structlog output reaches stderr."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper(), logging.INFO))


class ActivityLogger:
    """
    Central activity logging service for the ledger.
    """

    def __init__(self, logger_name: str = "stone_ledger.activity"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: ActivityEvent) -> None:
        """Log an activity event at the level matching its severity."""
        log_dict = event.to_log_dict()

        if event.severity == ActivitySeverity.ERROR:
            self._logger.error("ledger_activity", **log_dict)
        elif event.severity == ActivitySeverity.WARNING:
            self._logger.warning("ledger_activity", **log_dict)
        elif event.severity == ActivitySeverity.DEBUG:
            self._logger.debug("ledger_activity", **log_dict)
        else:
            self._logger.info("ledger_activity", **log_dict)

    def log_worker_added(self, record_id: int, name: str, stones_broken: float, payment: float) -> None:
        self.log(ActivityEventBuilder.worker_added(record_id, name, stones_broken, payment))

    def log_worker_updated(
        self,
        record_id: int,
        old_stones: float,
        new_stones: float,
        payment: float,
    ) -> None:
        self.log(ActivityEventBuilder.worker_updated(record_id, old_stones, new_stones, payment))

    def log_worker_removed(self, record_id: int, name: str) -> None:
        self.log(ActivityEventBuilder.worker_removed(record_id, name))

    def log_ledger_cleared(self, removed: int) -> None:
        self.log(ActivityEventBuilder.ledger_cleared(removed))

    def log_ledger_imported(self, count: int, recomputed: int) -> None:
        self.log(ActivityEventBuilder.ledger_imported(count, recomputed))

    def log_ledger_loaded(self, count: int, key: str) -> None:
        self.log(ActivityEventBuilder.ledger_loaded(count, key))

    def log_load_failed(self, key: str, reason: str) -> None:
        self.log(ActivityEventBuilder.load_failed(key, reason))

    def log_import_rejected(self, reason: str, issue_count: int = 0) -> None:
        self.log(ActivityEventBuilder.import_rejected(reason, issue_count))

    def log_payment_recomputed(self, record_id: int, supplied: Any, computed: float) -> None:
        self.log(ActivityEventBuilder.payment_recomputed(record_id, supplied, computed))

    def log_persistence_failed(self, operation: str, error_message: str) -> None:
        self.log(ActivityEventBuilder.persistence_failed(operation, error_message))


_default_logger: Optional[ActivityLogger] = None


def get_activity_logger() -> ActivityLogger:
    """Shared ActivityLogger for callers that don't inject their own."""
    global _default_logger
    if _default_logger is None:
        _default_logger = ActivityLogger()
    return _default_logger
