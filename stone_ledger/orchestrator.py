"""
Application wiring for Stone Ledger.

Builds a loaded WorkerLedger from settings. The UI calls this once and
keeps the ledger for the lifetime of the process.
"""

from typing import Optional

from stone_ledger.activity import ActivityLogger, configure_logging
from stone_ledger.config import get_settings
from stone_ledger.ledger import WorkerLedger
from stone_ledger.services.storage import InMemoryStore, JsonFileStore, KeyValueStore


def create_store(use_storage: bool = True) -> KeyValueStore:
    """JSON file store at the configured path, or an in-memory store."""
    if not use_storage:
        return InMemoryStore()
    return JsonFileStore(get_settings().ledger.data_file)


def create_ledger(
    use_storage: bool = True,
    store: Optional[KeyValueStore] = None,
    activity_logger: Optional[ActivityLogger] = None,
) -> WorkerLedger:
    """
    Create and load the application's ledger.

    Args:
        use_storage: Persist to the configured data file. If False the
            ledger lives in memory only.
        store: Explicit store, overrides use_storage
        activity_logger: Logger for ledger events

    Raises:
        PersistenceFailure: If the data file exists but cannot be read
    """
    settings = get_settings()
    configure_logging(settings.app.log_level)

    ledger = WorkerLedger(
        store or create_store(use_storage),
        activity_logger=activity_logger,
    )
    ledger.load()
    return ledger
