"""
Abstract Storage Interface

DESIGN DECISION: The ledger persists through a tiny key-value interface
shaped like a browser's localStorage: one string value per key, read and
written whole. This allows us to:
1. Keep the ledger's data in a plain JSON file on disk
2. Use in-memory storage for testing
3. Swap in another backend without touching ledger logic

Implementations raise PersistenceFailure when the backend cannot be read
or written. A missing key is not an error; `get` returns None.
"""

from abc import ABC, abstractmethod
from typing import Optional

from stone_ledger.errors import PersistenceFailure


class KeyValueStore(ABC):
    """
    Abstract interface for whole-value key-value storage.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the value stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored string, or None if the key is absent

        Raises:
            PersistenceFailure: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Replace the value stored under a key.

        Raises:
            PersistenceFailure: If the backend cannot be written
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if the key existed
        """
        pass


__all__ = ["KeyValueStore", "PersistenceFailure"]
