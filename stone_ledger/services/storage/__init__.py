"""
Storage Services Package

Provides the key-value interface the ledger persists through and two
implementations: an in-memory store and a JSON file on disk.
"""

from stone_ledger.services.storage.interface import (
    KeyValueStore,
    PersistenceFailure,
)
from stone_ledger.services.storage.json_file import JsonFileStore
from stone_ledger.services.storage.memory import InMemoryStore

__all__ = [
    # Interface
    "KeyValueStore",
    # Exceptions
    "PersistenceFailure",
    # Implementations
    "InMemoryStore",
    "JsonFileStore",
]
