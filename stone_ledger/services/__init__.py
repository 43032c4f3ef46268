"""Services package."""

from stone_ledger.services.storage import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
    PersistenceFailure,
)

__all__ = [
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "PersistenceFailure",
]
