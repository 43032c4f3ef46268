"""Activity logging package."""

from stone_ledger.activity.logger import (
    ActivityLogger,
    configure_logging,
    get_activity_logger,
)

__all__ = ["ActivityLogger", "configure_logging", "get_activity_logger"]
